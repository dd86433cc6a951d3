"""Recognition package: evaluation engine, fusion policy and grading."""
from .engine import RecognitionEngine, evaluate, fuse_scores
from .grading import Grade, Hint, Verdict, grade

__all__ = ["RecognitionEngine", "evaluate", "fuse_scores", "Grade", "Hint", "Verdict", "grade"]
