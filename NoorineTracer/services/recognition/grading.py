"""Turn a `RecognitionResult` into a practice verdict and a tracing hint."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from NoorineTracer.core.config import GradingConfig
from NoorineTracer.core.models import RecognitionResult


class Verdict(str, Enum):
    PASS = 'pass'
    ALMOST = 'almost'
    RETRY = 'retry'


class Hint(str, Enum):
    COVER_WHOLE_LETTER = 'cover_whole_letter'
    STAY_WITHIN_BOUNDS = 'stay_within_bounds'
    KEEP_GOING = 'keep_going'


@dataclass(frozen=True)
class Grade:
    verdict: Verdict
    score: float
    hint: Optional[Hint] = None

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS


def grade(result: RecognitionResult, cfg: GradingConfig | None = None) -> Grade:
    cfg = cfg or GradingConfig()
    score = result.score

    if score >= cfg.required_score:
        return Grade(Verdict.PASS, score)

    if score >= cfg.required_score * cfg.almost_ratio:
        shape = result.shape_analysis
        if shape.stroke_coverage < cfg.low_coverage:
            hint = Hint.COVER_WHOLE_LETTER
        elif shape.overflow_penalty > cfg.high_overflow:
            hint = Hint.STAY_WITHIN_BOUNDS
        else:
            hint = Hint.KEEP_GOING
        return Grade(Verdict.ALMOST, score, hint)

    return Grade(Verdict.RETRY, score, Hint.KEEP_GOING)
