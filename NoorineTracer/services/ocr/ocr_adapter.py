"""Factory for text recognizer backends.

`create_recognizer(cfg=None)` prefers the environment variable `OCR_BACKEND`,
then `cfg.ocr.backend`. Backends are looked up in `RECOGNIZER_REGISTRY`
(`tesseract`, `stub`). With no explicit backend, tesseract is used when
available and `ocr_stub.StubRecognizer` otherwise.
"""
from __future__ import annotations

import logging
import os

from NoorineTracer.core.config import AppConfig, OCRConfig
from NoorineTracer.core.registry import RECOGNIZER_REGISTRY
from .ocr_stub import StubRecognizer
from .pytesseract_service import TesseractRecognizer

logger = logging.getLogger(__name__)

_ALIASES = {'pytesseract': 'tesseract', 'tess': 'tesseract', 'none': 'stub'}

RECOGNIZER_REGISTRY.register('tesseract', TesseractRecognizer)
RECOGNIZER_REGISTRY.register('stub', StubRecognizer)


def _select_backend_name(cfg: AppConfig | None) -> str | None:
    # Env var takes precedence
    be = os.getenv('OCR_BACKEND')
    if not be and cfg is not None:
        be = cfg.ocr.backend
    if not be:
        return None
    be = be.strip().lower()
    return _ALIASES.get(be, be)


def create_recognizer(cfg: AppConfig | None = None):
    """Create a recognizer implementing `available()` and `extract_text(image, **kwargs)`."""
    ocr_cfg = cfg.ocr if cfg is not None else OCRConfig()
    backend = _select_backend_name(cfg)

    if backend:
        if backend not in RECOGNIZER_REGISTRY:
            msg = f"Unknown OCR backend '{backend}'. Supported: {', '.join(sorted(RECOGNIZER_REGISTRY.list()))}"
            logger.error(msg)
            raise RuntimeError(msg)
        recognizer = RECOGNIZER_REGISTRY.create(backend, ocr_cfg)
        if not recognizer.available():
            msg = f"Requested OCR backend '{backend}' is not available."
            logger.error(msg)
            raise RuntimeError(msg)
        logger.info('Using %s OCR backend', backend)
        return recognizer

    # No explicit backend: try tesseract; otherwise stub
    recognizer = RECOGNIZER_REGISTRY.create('tesseract', ocr_cfg)
    if recognizer.available():
        logger.info('Using tesseract OCR backend (lang=%s)', ocr_cfg.language)
        return recognizer

    logger.warning('No OCR backend available. Falling back to stub.')
    return RECOGNIZER_REGISTRY.create('stub', ocr_cfg)
