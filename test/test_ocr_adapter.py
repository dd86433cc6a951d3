import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pytest
import pytesseract
from PIL import Image

from NoorineTracer.core.config import AppConfig, OCRConfig
from NoorineTracer.core.models import RasterBitmap
from NoorineTracer.core.registry import Registry
from NoorineTracer.services.ocr import create_recognizer
from NoorineTracer.services.ocr.ocr_stub import StubRecognizer
from NoorineTracer.services.ocr.preprocess import prepare_for_ocr, to_pil
from NoorineTracer.services.ocr.pytesseract_service import TesseractRecognizer


def _fake_tesseract(monkeypatch, langs=('ara', 'eng'), text=' ب\n'):
    calls = []

    def image_to_string(image, lang=None, config='', timeout=0, **kwargs):
        calls.append({'image': image, 'lang': lang, 'config': config, 'timeout': timeout})
        return text

    monkeypatch.setattr(pytesseract, 'get_tesseract_version', lambda: '5.3.0')
    monkeypatch.setattr(pytesseract, 'get_languages', lambda config='': list(langs))
    monkeypatch.setattr(pytesseract, 'image_to_string', image_to_string)
    return calls


def _missing_tesseract(monkeypatch):
    def raise_missing():
        raise pytesseract.TesseractNotFoundError()
    monkeypatch.setattr(pytesseract, 'get_tesseract_version', raise_missing)


def _ink_bitmap():
    g = np.zeros((60, 60), dtype=np.uint8)
    g[20:40, 25:35] = 255
    return RasterBitmap(g)


def test_prepare_for_ocr_inverts_and_pads():
    img = prepare_for_ocr(_ink_bitmap(), padding=10)
    assert img.size == (80, 80)
    assert img.getpixel((0, 0)) == 255        # padding is white
    assert img.getpixel((40, 40)) == 0        # ink becomes dark
    assert set(np.unique(np.array(img))) <= {0, 255}


def test_to_pil_rejects_unknown_types():
    assert isinstance(to_pil(_ink_bitmap()), Image.Image)
    with pytest.raises(TypeError):
        to_pil([[0, 1]])


def test_tesseract_extract_text_uses_arabic_single_char_mode(monkeypatch):
    calls = _fake_tesseract(monkeypatch)
    recognizer = TesseractRecognizer(OCRConfig(timeout_s=2.0))
    assert recognizer.extract_text(_ink_bitmap()) == 'ب'
    assert calls[0]['lang'] == 'ara'
    assert '--psm 10' in calls[0]['config']
    assert calls[0]['timeout'] == 2.0


def test_tesseract_availability_requires_language_pack(monkeypatch):
    _fake_tesseract(monkeypatch, langs=('eng',))
    assert not TesseractRecognizer().available()
    _fake_tesseract(monkeypatch, langs=('ara',))
    assert TesseractRecognizer().available()
    _missing_tesseract(monkeypatch)
    assert not TesseractRecognizer().available()


def test_factory_falls_back_to_stub(monkeypatch):
    monkeypatch.delenv('OCR_BACKEND', raising=False)
    _missing_tesseract(monkeypatch)
    recognizer = create_recognizer()
    assert isinstance(recognizer, StubRecognizer)
    assert recognizer.extract_text(_ink_bitmap()) == ''


def test_factory_prefers_tesseract_when_available(monkeypatch):
    monkeypatch.delenv('OCR_BACKEND', raising=False)
    _fake_tesseract(monkeypatch)
    assert isinstance(create_recognizer(), TesseractRecognizer)


def test_factory_honours_env_and_config(monkeypatch):
    _fake_tesseract(monkeypatch)
    monkeypatch.setenv('OCR_BACKEND', 'stub')
    assert isinstance(create_recognizer(), StubRecognizer)

    monkeypatch.delenv('OCR_BACKEND')
    cfg = AppConfig()
    cfg.ocr.backend = 'none'
    assert isinstance(create_recognizer(cfg), StubRecognizer)


def test_factory_rejects_unknown_or_unavailable_backend(monkeypatch):
    monkeypatch.setenv('OCR_BACKEND', 'vision')
    with pytest.raises(RuntimeError):
        create_recognizer()

    monkeypatch.setenv('OCR_BACKEND', 'tesseract')
    _missing_tesseract(monkeypatch)
    with pytest.raises(RuntimeError):
        create_recognizer()


def test_registry():
    reg = Registry()
    reg.register('Stub', StubRecognizer)
    assert 'stub' in reg
    assert isinstance(reg.create('STUB'), StubRecognizer)
    with pytest.raises(ValueError):
        reg.register('stub', StubRecognizer)
    with pytest.raises(KeyError):
        reg.create('missing')
