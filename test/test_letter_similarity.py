import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from NoorineTracer.services.similarity.letter_similarity import (
    are_similar_letters,
    base_letter,
    compare_letters,
    normalize_arabic,
)


def test_missing_or_empty_recognition_scores_zero():
    assert compare_letters(None, "ب") == 0.0
    assert compare_letters("", "ب") == 0.0


def test_exact_and_diacritic_insensitive_match():
    assert compare_letters("ب", "ب") == 1.0
    assert compare_letters("ب\u064e", "ب") == 1.0
    assert compare_letters("ب", "ب\u0651") == 1.0


def test_containment_either_direction():
    # recognizer read extra characters around the letter
    assert compare_letters("بيت", "ب") == 1.0
    # expected form spelled with tatweel
    assert compare_letters("ب", "\u0640ب\u0640") == 1.0


def test_hamza_alef_variants_share_base_letter():
    assert compare_letters("أ", "ا") == 0.9
    assert compare_letters("آ", "إ") == 0.9


def test_confusable_groups():
    assert compare_letters("س", "ش") == 0.7
    assert compare_letters("ت", "ن") == 0.7
    assert compare_letters("ف", "ق") == 0.7


def test_unrelated_letters_score_zero():
    assert compare_letters("س", "م") == 0.0
    assert compare_letters("ر", "د") == 0.0


def test_marks_only_recognition_scores_zero():
    assert compare_letters("\u064e", "ب") == 0.0


def test_normalize_strips_every_mark_and_tatweel():
    marks = "".join(chr(cp) for cp in range(0x064B, 0x0653)) + "\u0670"
    marked = "\u0640" + "ب" + marks
    assert normalize_arabic(marked) == "ب"


def test_normalize_is_idempotent():
    for text in ("بَيْتٌ", "كتاب", "ـسـ", ""):
        once = normalize_arabic(text)
        assert normalize_arabic(once) == once
    assert normalize_arabic("كتاب") == "كتاب"


def test_base_letter_and_groups():
    assert base_letter("") is None
    assert base_letter("إبل") == "ا"
    assert base_letter("x") == "x"
    assert are_similar_letters("ج", "خ")
    assert not are_similar_letters("ج", None)
    assert not are_similar_letters("ج", "د")
