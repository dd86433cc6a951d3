"""OCR package: recognizer factory and helpers.

This package provides a `create_recognizer(cfg=None)` factory (in
`ocr_adapter`) and small preprocessing helpers. A stub fallback keeps
evaluation working on machines without tesseract.
"""
from .ocr_adapter import create_recognizer

__all__ = ["create_recognizer"]
