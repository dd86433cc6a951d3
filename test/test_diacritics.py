import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from NoorineTracer.core.models import DiacriticInfo
from NoorineTracer.services.text.diacritics import (
    DIACRITICS,
    detect_diacritics,
    extract_letters_with_diacritics,
    has_diacritics,
)

FATHA = "\u064e"
DAMMA = "\u064f"
SHADDA = "\u0651"
SUKUN = "\u0652"


def test_detect_in_order_of_appearance():
    word = "أ" + DAMMA + "م" + SHADDA           # umm
    names = [info.name for info in detect_diacritics(word)]
    assert names == ["Hamza on Alif", "Damma", "Shadda"]


def test_detect_reports_each_mark_once():
    word = "ب" + FATHA + "ت" + FATHA + "ء"
    names = [info.name for info in detect_diacritics(word)]
    assert names == ["Fatha", "Hamza"]


def test_combining_hamza_shares_entry_with_standalone_hamza():
    assert DIACRITICS[0x0654] == DIACRITICS[0x0621]
    word = "ء" + "\u0654"
    assert len(detect_diacritics(word)) == 1


def test_info_equality_is_by_name():
    a = DiacriticInfo("x", "Fatha", "", "", "")
    assert a == DIACRITICS[0x064E]
    assert len({a, DIACRITICS[0x064E]}) == 1


def test_has_diacritics():
    assert has_diacritics("ب" + SUKUN)
    assert has_diacritics("آ" + "\u0653")
    assert not has_diacritics("كتاب")
    # hamza-seated letters are letters, not marks
    assert not has_diacritics("أ")


def test_extract_letters_groups_marks_with_their_letter():
    word = "أ" + FATHA + "ب" + SUKUN
    letters = extract_letters_with_diacritics(word, [1, 2])
    assert [(l.letter_id, l.base_character, l.diacritics) for l in letters] == [
        (1, "أ", FATHA),
        (2, "ب", SUKUN),
    ]
    assert letters[1].full_character == "ب" + SUKUN


def test_extract_letters_without_enough_ids_uses_zero():
    letters = extract_letters_with_diacritics("باب", [2])
    assert [l.letter_id for l in letters] == [2, 0, 0]


def test_extract_letters_skips_non_arabic_and_leading_marks():
    letters = extract_letters_with_diacritics(FATHA + "ب x!", [7])
    assert len(letters) == 1
    assert letters[0].diacritics == ""
