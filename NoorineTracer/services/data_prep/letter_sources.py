"""Arabic letter catalog and glyph calibration.

The catalog lists the 28 letters plus ta marbuta and hamza with the contextual
forms a learner practises. Contextual forms are spelled with tatweel (U+0640)
so a shaping-aware renderer picks the joined glyph.

Calibration renders each form the way the practice canvas does and records the
normalized ink bounding box, which is what the stroke guide overlay is laid out
against.
"""
from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import argparse
import json
import logging

import numpy as np

from NoorineTracer.core.models import FormType, GlyphBoundingBox, LetterEntry
from NoorineTracer.services.rendering.rasterize import GlyphRenderer

logger = logging.getLogger(__name__)

TATWEEL = "ـ"

CALIBRATION_CANVAS = 250
CALIBRATION_FONT_SIZE = 162.5
CALIBRATION_THRESHOLD = 10


def _all_forms(letter: str) -> Tuple[Tuple[FormType, str], ...]:
    return (
        (FormType.ISOLATED, letter),
        (FormType.INITIAL, letter + TATWEEL),
        (FormType.MEDIAL, TATWEEL + letter + TATWEEL),
        (FormType.FINAL, TATWEEL + letter),
    )


def _right_joining_forms(letter: str) -> Tuple[Tuple[FormType, str], ...]:
    # letters that never connect to the following letter
    return (
        (FormType.ISOLATED, letter),
        (FormType.FINAL, TATWEEL + letter),
    )


LETTERS: Tuple[LetterEntry, ...] = (
    LetterEntry("Alif", 1, _right_joining_forms("ا")),
    LetterEntry("Ba", 2, _all_forms("ب")),
    LetterEntry("Ta", 3, _all_forms("ت")),
    LetterEntry("Tha", 4, _all_forms("ث")),
    LetterEntry("Jim", 5, _all_forms("ج")),
    LetterEntry("Ha", 6, _all_forms("ح")),
    LetterEntry("Kha", 7, _all_forms("خ")),
    LetterEntry("Dal", 8, _right_joining_forms("د")),
    LetterEntry("Dhal", 9, _right_joining_forms("ذ")),
    LetterEntry("Ra", 10, _right_joining_forms("ر")),
    LetterEntry("Zay", 11, _right_joining_forms("ز")),
    LetterEntry("Sin", 12, _all_forms("س")),
    LetterEntry("Shin", 13, _all_forms("ش")),
    LetterEntry("Sad", 14, _all_forms("ص")),
    LetterEntry("Dad", 15, _all_forms("ض")),
    LetterEntry("Ta_emphatic", 16, _all_forms("ط")),
    LetterEntry("Za_emphatic", 17, _all_forms("ظ")),
    LetterEntry("Ayn", 18, _all_forms("ع")),
    LetterEntry("Ghayn", 19, _all_forms("غ")),
    LetterEntry("Fa", 20, _all_forms("ف")),
    LetterEntry("Qaf", 21, _all_forms("ق")),
    LetterEntry("Kaf", 22, _all_forms("ك")),
    LetterEntry("Lam", 23, _all_forms("ل")),
    LetterEntry("Mim", 24, _all_forms("م")),
    LetterEntry("Nun", 25, _all_forms("ن")),
    LetterEntry("Ha_light", 26, _all_forms("ه")),
    LetterEntry("Waw", 27, _right_joining_forms("و")),
    LetterEntry("Ya", 28, _all_forms("ي")),
    LetterEntry("TaMarbuta", 29, _right_joining_forms("ة")),
    LetterEntry("Hamza", 30, ((FormType.ISOLATED, "ء"),)),
)


def find_letter(key: Union[int, str]) -> Optional[LetterEntry]:
    """Look a letter up by catalog id, name (case-insensitive) or isolated glyph."""
    for entry in LETTERS:
        if isinstance(key, int):
            if entry.id == key:
                return entry
        elif key.lower() == entry.name.lower() or key == entry.isolated:
            return entry
    return None


def iter_forms(letters: Sequence[LetterEntry] = LETTERS) -> Iterator[Tuple[LetterEntry, FormType, str]]:
    for entry in letters:
        for form_type, glyph in entry.forms:
            yield entry, form_type, glyph


def scan_bounding_box(pixels: np.ndarray, threshold: int = CALIBRATION_THRESHOLD) -> Optional[Tuple[float, float, float, float]]:
    """Normalized (min_x, max_x, min_y, max_y) of pixels above `threshold`."""
    ys, xs = np.nonzero(pixels > threshold)
    if xs.size == 0:
        return None
    height, width = pixels.shape
    return (xs.min() / width, xs.max() / width, ys.min() / height, ys.max() / height)


def calibrate(glyph: str, form_type: Union[FormType, str], renderer: GlyphRenderer | None = None) -> Optional[GlyphBoundingBox]:
    renderer = renderer or GlyphRenderer()
    bitmap = renderer.render_reference(glyph, CALIBRATION_CANVAS, font_size=CALIBRATION_FONT_SIZE)
    form = FormType(form_type).value
    box = scan_bounding_box(bitmap.pixels)
    if box is None:
        logger.warning('No pixels found for %r [%s]', glyph, form)
        return None
    min_x, max_x, min_y, max_y = (float(v) for v in box)
    return GlyphBoundingBox(glyph, form, min_x, max_x, min_y, max_y)


def calibrate_all(renderer: GlyphRenderer | None = None,
                  letters: Sequence[LetterEntry] = LETTERS) -> List[GlyphBoundingBox]:
    renderer = renderer or GlyphRenderer()
    logger.info('Calibrating glyphs on %dx%d canvas at %.1fpt', CALIBRATION_CANVAS, CALIBRATION_CANVAS, CALIBRATION_FONT_SIZE)
    results: List[GlyphBoundingBox] = []
    for entry, form_type, glyph in iter_forms(letters):
        box = calibrate(glyph, form_type, renderer)
        if box is not None:
            logger.debug('%s (id: %d) %s', entry.name, entry.id, box.describe())
            results.append(box)
    return results


def calibration_key(entry: LetterEntry, form_type: Union[FormType, str]) -> str:
    return f"{entry.id}_{FormType(form_type).value}"


def save_calibration_json(path: Union[str, Path], boxes: Sequence[GlyphBoundingBox]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        json.dump([asdict(b) for b in boxes], f, ensure_ascii=False, indent=2)


def load_calibration_json(path: Union[str, Path]) -> List[GlyphBoundingBox]:
    with Path(path).open('r', encoding='utf-8') as f:
        data = json.load(f)
    return [GlyphBoundingBox(**item) for item in data]


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Calibrate rendered glyph bounding boxes.')
    parser.add_argument('--font', default=None, help='TrueType font with Arabic glyphs')
    parser.add_argument('--out', default=None, help='Output JSON file (prints when omitted)')
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    boxes = calibrate_all(GlyphRenderer(font_path=args.font))
    print('Calibrated', len(boxes), 'forms')
    if args.out:
        save_calibration_json(args.out, boxes)
        print('Saved calibration to', args.out)
    else:
        for b in boxes:
            print(' ', b.describe())
