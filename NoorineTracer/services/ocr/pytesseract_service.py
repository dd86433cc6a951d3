"""pytesseract backend for recognizing a single traced Arabic letter.

Thin wrapper around ``pytesseract.image_to_string`` run in single-character
page segmentation mode against the ``ara`` traineddata.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

import pytesseract

from NoorineTracer.core.config import OCRConfig
from .preprocess import prepare_for_ocr

logger = logging.getLogger(__name__)


class TesseractRecognizer:
    """Wrapper around pytesseract with drawing-specific preprocessing.

    Methods
    - `available()` -> bool: tesseract binary and language pack present
    - `extract_text(image, **kwargs)` -> str: recognized text with whitespace removed,
      '' when nothing was read
    """

    def __init__(self, cfg: OCRConfig | None = None) -> None:
        self.cfg = cfg or OCRConfig()
        if self.cfg.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.cfg.tesseract_cmd
        self._available: bool | None = None

    def available(self) -> bool:
        if self._available is not None:
            return self._available
        try:
            version = pytesseract.get_tesseract_version()
            langs = pytesseract.get_languages(config='')
        except (pytesseract.TesseractNotFoundError, OSError, RuntimeError) as exc:
            logger.debug('tesseract not usable: %s', exc, exc_info=True)
            self._available = False
            return False
        if self.cfg.language not in langs:
            logger.warning('tesseract %s has no %r traineddata (available: %s)', version, self.cfg.language, langs)
            self._available = False
            return False
        logger.debug('tesseract %s with %r available', version, self.cfg.language)
        self._available = True
        return True

    def _config_string(self) -> str:
        return f'--oem {self.cfg.oem} --psm {self.cfg.psm}'

    def extract_text(self, image, **kwargs: Any) -> str:
        lang = kwargs.get('lang', self.cfg.language)
        timeout = kwargs.get('timeout', self.cfg.timeout_s)
        pil = prepare_for_ocr(image) if kwargs.get('preprocess', True) else image
        raw = pytesseract.image_to_string(pil, lang=lang, config=self._config_string(), timeout=timeout)
        text = ''.join((raw or '').split())
        logger.debug('tesseract read %r', text)
        return text

    def describe(self) -> Dict[str, Any]:
        return {'backend': 'tesseract', 'lang': self.cfg.language, 'config': self._config_string()}
