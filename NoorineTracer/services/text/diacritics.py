"""Arabic diacritic reference data and text helpers.

Used by the drawing review screen to explain the marks of a word. The table
covers short vowels, sukun, shadda, tanwin, superscript alef and the hamza
family (standalone, seated, and combining).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from NoorineTracer.core.models import DiacriticInfo, LetterWithDiacritics

logger = logging.getLogger(__name__)

_HAMZA = DiacriticInfo(
    character="ء",
    name="Hamza",
    name_ar="هَمْزَة",
    explanation="Glottal stop - brief throat pause",
    explanation_fr="Coup de glotte - pause brève dans la gorge",
)

DIACRITICS: Dict[int, DiacriticInfo] = {
    0x064E: DiacriticInfo("◌َ", "Fatha", "فَتْحَة",
                          "Short 'a' sound - like in 'cat'",
                          "Son 'a' court - comme dans 'chat'"),
    0x064F: DiacriticInfo("◌ُ", "Damma", "ضَمَّة",
                          "Short 'u' sound - like in 'put'",
                          "Son 'ou' court - comme dans 'tout'"),
    0x0650: DiacriticInfo("◌ِ", "Kasra", "كَسْرَة",
                          "Short 'i' sound - like in 'bit'",
                          "Son 'i' court - comme dans 'lit'"),
    0x0652: DiacriticInfo("◌ْ", "Sukun", "سُكُون",
                          "No vowel - consonant ends syllable",
                          "Pas de voyelle - la consonne termine la syllabe"),
    0x0651: DiacriticInfo("◌ّ", "Shadda", "شَدَّة",
                          "Double the consonant sound",
                          "Doubler le son de la consonne"),
    0x0621: _HAMZA,
    0x0623: DiacriticInfo("أ", "Hamza on Alif", "أَلِف بِهَمْزَة",
                          "Glottal stop starting with 'a' sound",
                          "Coup de glotte commençant par le son 'a'"),
    0x0625: DiacriticInfo("إ", "Hamza under Alif", "هَمْزَة تَحْت الأَلِف",
                          "Glottal stop starting with 'i' sound",
                          "Coup de glotte commençant par le son 'i'"),
    0x0622: DiacriticInfo("آ", "Alif Madda", "أَلِف مَدَّة",
                          "Long 'aa' sound - held longer",
                          "Son 'aa' long - tenu plus longtemps"),
    0x0624: DiacriticInfo("ؤ", "Hamza on Waw", "هَمْزَة عَلَى واو",
                          "Glottal stop with 'u' sound",
                          "Coup de glotte avec le son 'ou'"),
    0x0626: DiacriticInfo("ئ", "Hamza on Ya", "هَمْزَة عَلَى ياء",
                          "Glottal stop with 'i' sound",
                          "Coup de glotte avec le son 'i'"),
    0x0654: _HAMZA,
    0x0655: _HAMZA,
    0x064B: DiacriticInfo("◌ً", "Tanwin Fath", "تَنْوِين فَتْح",
                          "Adds '-an' sound at the end",
                          "Ajoute le son '-an' à la fin"),
    0x064C: DiacriticInfo("◌ٌ", "Tanwin Damm", "تَنْوِين ضَمّ",
                          "Adds '-un' sound at the end",
                          "Ajoute le son '-oun' à la fin"),
    0x064D: DiacriticInfo("◌ٍ", "Tanwin Kasr", "تَنْوِين كَسْر",
                          "Adds '-in' sound at the end",
                          "Ajoute le son '-in' à la fin"),
    0x0670: DiacriticInfo("◌ٰ", "Alif Khanjariyya", "أَلِف خَنْجَرِيَّة",
                          "Small alif - represents long 'a'",
                          "Petit alif - représente un 'a' long"),
}

# Combining marks that attach to the preceding letter (includes maddah above).
COMBINING_MARKS = frozenset(
    [0x064E, 0x064F, 0x0650, 0x0651, 0x0652, 0x064B, 0x064C, 0x064D, 0x0670, 0x0653]
)

ARABIC_BLOCK = range(0x0600, 0x0700)


def detect_diacritics(text: str) -> List[DiacriticInfo]:
    """Explanations for the marks in `text`, first occurrence order, no repeats."""
    results: List[DiacriticInfo] = []
    for ch in text:
        info = DIACRITICS.get(ord(ch))
        if info is not None and info not in results:
            results.append(info)
    return results


def has_diacritics(text: str) -> bool:
    return any(ord(ch) in COMBINING_MARKS for ch in text)


def extract_letters_with_diacritics(text: str, letter_ids: Sequence[int]) -> List[LetterWithDiacritics]:
    """Group each Arabic base letter with the marks that follow it.

    Ids from `letter_ids` are assigned in order; letters past the end of
    `letter_ids` get id 0. Characters outside the Arabic block (spaces,
    punctuation) are skipped, and marks before the first letter are dropped.
    """
    results: List[LetterWithDiacritics] = []
    current_base = ""
    current_marks = ""

    def _flush() -> None:
        if current_base:
            idx = len(results)
            letter_id = letter_ids[idx] if idx < len(letter_ids) else 0
            results.append(LetterWithDiacritics(letter_id, current_base, current_marks))

    for ch in text:
        cp = ord(ch)
        if cp in COMBINING_MARKS:
            if current_base:
                current_marks += ch
        elif cp in ARABIC_BLOCK:
            _flush()
            current_base = ch
            current_marks = ""
    _flush()

    logger.debug('Split %r into %d letters', text, len(results))
    return results
