"""Rule-based similarity between a recognized string and an expected Arabic letter.

Scores are tiered rather than edit-distance based: the question being graded is
whether the learner attempted the right letter, which is dominated by shared
letter shapes.

    1.0  normalized strings contain one another
    0.9  same base letter (hamza/madda alef variants collapse to alef)
    0.7  base letters in the same confusable group
    0.0  anything else, or nothing recognized
"""
from __future__ import annotations

from typing import Optional

# Tanwin (3), fatha, damma, kasra, shadda, sukun, superscript alef, tatweel.
DIACRITIC_CODEPOINTS = frozenset(
    [0x064B, 0x064C, 0x064D, 0x064E, 0x064F, 0x0650, 0x0651, 0x0652, 0x0670, 0x0640]
)

_STRIP_TABLE = {cp: None for cp in DIACRITIC_CODEPOINTS}

BASE_LETTERS = {
    "ا": "ا", "أ": "ا", "إ": "ا", "آ": "ا",
    "ب": "ب", "ت": "ت", "ث": "ث",
    "ج": "ج", "ح": "ح", "خ": "خ",
    "د": "د", "ذ": "ذ", "ر": "ر", "ز": "ز",
    "س": "س", "ش": "ش", "ص": "ص", "ض": "ض",
    "ط": "ط", "ظ": "ظ", "ع": "ع", "غ": "غ",
    "ف": "ف", "ق": "ق", "ك": "ك", "ل": "ل",
    "م": "م", "ن": "ن", "ه": "ه", "و": "و", "ي": "ي",
}

CONFUSABLE_GROUPS = (
    frozenset("بتثني"),
    frozenset("جحخ"),
    frozenset("دذ"),
    frozenset("رز"),
    frozenset("سش"),
    frozenset("صض"),
    frozenset("طظ"),
    frozenset("عغ"),
    frozenset("فق"),
)

EXACT_SCORE = 1.0
BASE_LETTER_SCORE = 0.9
CONFUSABLE_SCORE = 0.7


def normalize_arabic(text: str) -> str:
    """Strip Arabic diacritical marks and tatweel."""
    return text.translate(_STRIP_TABLE)


def base_letter(text: str) -> Optional[str]:
    """Canonical base of the first character, or None for an empty string.

    Characters outside the table map to themselves.
    """
    if not text:
        return None
    first = text[0]
    return BASE_LETTERS.get(first, first)


def are_similar_letters(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return any(a in group and b in group for group in CONFUSABLE_GROUPS)


def compare_letters(recognized: Optional[str], expected: str) -> float:
    if not recognized:
        return 0.0

    norm_recognized = normalize_arabic(recognized)
    norm_expected = normalize_arabic(expected)
    # marks only: nothing left to compare
    if not norm_recognized or not norm_expected:
        return 0.0

    if norm_expected in norm_recognized or norm_recognized in norm_expected:
        return EXACT_SCORE

    base_recognized = base_letter(norm_recognized)
    base_expected = base_letter(norm_expected)

    if base_recognized == base_expected:
        return BASE_LETTER_SCORE

    if are_similar_letters(base_recognized, base_expected):
        return CONFUSABLE_SCORE

    return 0.0
