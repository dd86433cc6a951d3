"""Rasterize drawings and reference glyphs into `RasterBitmap`s.

User strokes are drawn as white polylines with round caps and joins on a black
canvas; reference letters are drawn centred in white with a TrueType font.

Typical usage:
    renderer = GlyphRenderer.from_config(cfg.render)
    user = render_drawing(drawing, 300, line_width=12)
    ref = renderer.render_reference('ب', 300)
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from NoorineTracer.core.config import RenderConfig
from NoorineTracer.core.models import Drawing, Point, RasterBitmap

logger = logging.getLogger(__name__)

INK = 255
BACKGROUND = 0

# Tried in order when no font path is configured; all ship Arabic glyphs.
FALLBACK_FONTS = (
    'NotoNaskhArabic-Regular.ttf',
    'NotoSansArabic-Regular.ttf',
    'DejaVuSans.ttf',
    'Arial.ttf',
)


def _draw_polyline(draw: ImageDraw.ImageDraw, points: Sequence[Point], width: int) -> None:
    radius = width / 2
    if len(points) > 1:
        draw.line(list(points), fill=INK, width=width, joint='curve')
    # round caps, and a dot for single-point strokes
    for x, y in (points[0], points[-1]):
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=INK)


def render_strokes(strokes: Iterable[Sequence[Point]], size: int | Tuple[int, int],
                   line_width: int = 12) -> RasterBitmap:
    if isinstance(size, int):
        size = (size, size)
    img = Image.new('L', size, BACKGROUND)
    draw = ImageDraw.Draw(img)
    for stroke in strokes:
        if not stroke:
            continue
        _draw_polyline(draw, stroke, line_width)
    return RasterBitmap.from_image(img)


def render_drawing(drawing: Drawing, size: int | Tuple[int, int], line_width: int = 12) -> RasterBitmap:
    """Render completed and in-progress strokes of `drawing`."""
    return render_strokes(drawing.all_strokes(), size, line_width)


@lru_cache(maxsize=32)
def _cached_font(font_path: str, size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(font_path, size)


def load_font(font_path: Optional[str], size: int):
    """Load a TrueType font, trying known Arabic-capable fonts when no path is given.

    Falls back to Pillow's bundled default font with a warning.
    """
    candidates = (font_path,) if font_path else FALLBACK_FONTS
    for candidate in candidates:
        try:
            return _cached_font(candidate, size)
        except OSError:
            logger.debug('Font %s not loadable', candidate, exc_info=True)
    logger.warning('No Arabic font found (tried %s); using Pillow default font', ', '.join(candidates))
    return ImageFont.load_default(size=size)


class GlyphRenderer:
    """Render letters centred on a black square canvas."""

    def __init__(self, font_path: Optional[str] = None, font_scale: float = 0.65) -> None:
        self.font_path = font_path
        self.font_scale = font_scale

    @classmethod
    def from_config(cls, cfg: RenderConfig) -> "GlyphRenderer":
        return cls(font_path=cfg.font_path, font_scale=cfg.font_scale)

    def font_size_for(self, canvas_size: int) -> int:
        return max(1, round(canvas_size * self.font_scale))

    def render_reference(self, letter: str, size: int | Tuple[int, int],
                         font_size: Optional[float] = None, font=None) -> RasterBitmap:
        """Draw `letter` centred on the canvas.

        `font` overrides font loading entirely; otherwise `font_size` (default
        `font_scale` of the shorter canvas side) selects the size.
        """
        if isinstance(size, int):
            size = (size, size)
        width, height = size
        if font is None:
            pt = round(font_size) if font_size else self.font_size_for(min(width, height))
            font = load_font(self.font_path, pt)

        img = Image.new('L', size, BACKGROUND)
        draw = ImageDraw.Draw(img)
        left, top, right, bottom = draw.textbbox((0, 0), letter, font=font)
        x = (width - (right - left)) / 2 - left
        y = (height - (bottom - top)) / 2 - top
        draw.text((x, y), letter, fill=INK, font=font)
        return RasterBitmap.from_image(img)
