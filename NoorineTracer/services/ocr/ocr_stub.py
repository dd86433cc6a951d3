"""Fallback recognizer used when no real OCR backend is available.

This stub returns no text and logs a clear warning, so evaluation still runs
and the engine falls back to shape-only scoring.
"""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class StubRecognizer:
    def __init__(self, cfg=None):
        logger.warning('Using OCR stub: no OCR backend available. Install tesseract with the "ara" '
                       'language pack to enable text recognition.')

    def available(self) -> bool:
        return True

    def extract_text(self, image, **kwargs) -> str:
        return ''
