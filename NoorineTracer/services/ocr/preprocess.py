"""Small image conversion and preprocessing helpers used by OCR backends.

Drawings are rasterized white-on-black; OCR engines expect dark text on a light
page, so `prepare_for_ocr` inverts and pads before binarizing.
"""
from __future__ import annotations

import logging

from PIL import Image, ImageFilter, ImageOps

from NoorineTracer.core.models import RasterBitmap

logger = logging.getLogger(__name__)


def to_pil(image) -> Image.Image:
    """Convert a `RasterBitmap` to a grayscale PIL `Image`.

    A PIL Image is returned unchanged.
    """
    if isinstance(image, RasterBitmap):
        return image.to_image()
    if isinstance(image, Image.Image):
        return image
    raise TypeError('Expected RasterBitmap or PIL.Image')


def prepare_for_ocr(image, padding: int = 20, threshold: int = 128, invert: bool = True) -> Image.Image:
    """Grayscale, invert to dark-on-light, pad, despeckle and binarize."""
    img = to_pil(image).convert('L')
    if invert:
        img = ImageOps.invert(img)
    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill=255)
    # gentle median filter to reduce noise
    img = img.filter(ImageFilter.MedianFilter(size=3))
    img = ImageOps.autocontrast(img)
    return img.point(lambda p: 255 if p > threshold else 0)
