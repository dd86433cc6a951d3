"""Core data model.

Drawing input, raster bitmaps and the records produced by the evaluation
engine. Scores stored on result records are always clamped to [0, 1].
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

Point = Tuple[float, float]
Stroke = Tuple[Point, ...]


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


# ---- Drawing ----
@dataclass
class Drawing:
    """Strokes of one practice attempt: completed strokes plus the one in progress."""
    strokes: List[Stroke] = field(default_factory=list)
    current_stroke: List[Point] = field(default_factory=list)

    @classmethod
    def from_points(cls, point_lists: Iterable[Sequence[Point]]) -> "Drawing":
        drawing = cls()
        for points in point_lists:
            for p in points:
                drawing.add_point(p)
            drawing.finish_stroke()
        return drawing

    def add_point(self, point: Point) -> None:
        x, y = point
        self.current_stroke.append((float(x), float(y)))

    def finish_stroke(self) -> None:
        if self.current_stroke:
            self.strokes.append(tuple(self.current_stroke))
            self.current_stroke = []

    def clear(self) -> None:
        self.strokes = []
        self.current_stroke = []

    @property
    def has_content(self) -> bool:
        return bool(self.strokes) or bool(self.current_stroke)

    def all_strokes(self) -> List[Stroke]:
        """Completed strokes followed by the in-progress one, if any."""
        out = list(self.strokes)
        if self.current_stroke:
            out.append(tuple(self.current_stroke))
        return out


# ---- Bitmaps ----
class RasterBitmap:
    """Immutable single-channel 8-bit bitmap; ink is bright on a black background."""

    __slots__ = ('_pixels',)

    def __init__(self, pixels) -> None:
        arr = np.asarray(pixels)
        if arr.ndim != 2:
            raise ValueError(f'RasterBitmap expects a 2-D array, got shape {arr.shape}')
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        else:
            arr = arr.copy()
        arr.setflags(write=False)
        self._pixels = arr

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterBitmap":
        return cls(np.array(image.convert('L')))

    @classmethod
    def blank(cls, width: int, height: Optional[int] = None) -> "RasterBitmap":
        return cls(np.zeros((height or width, width), dtype=np.uint8))

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    def has_ink(self, threshold: int = 0) -> bool:
        return bool((self._pixels > threshold).any())

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBitmap):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._pixels, other._pixels))

    def __repr__(self) -> str:
        return f'RasterBitmap({self.width}x{self.height})'


# ---- Scoring records ----
@dataclass(frozen=True)
class ShapeAnalysis:
    bounding_box_match: float
    stroke_coverage: float
    overflow_penalty: float
    coverage_weight: float = 0.5
    bounding_weight: float = 0.3
    overflow_weight: float = 0.2

    def __post_init__(self):
        object.__setattr__(self, 'bounding_box_match', clamp01(self.bounding_box_match))
        object.__setattr__(self, 'stroke_coverage', clamp01(self.stroke_coverage))
        object.__setattr__(self, 'overflow_penalty', clamp01(self.overflow_penalty))

    @classmethod
    def empty(cls) -> "ShapeAnalysis":
        return cls(0.0, 0.0, 0.0)

    @property
    def combined_score(self) -> float:
        overflow_score = max(0.0, 1.0 - self.overflow_penalty * 2)
        return clamp01(
            self.stroke_coverage * self.coverage_weight
            + self.bounding_box_match * self.bounding_weight
            + overflow_score * self.overflow_weight
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'boundingBoxMatch': self.bounding_box_match,
            'strokeCoverage': self.stroke_coverage,
            'overflowPenalty': self.overflow_penalty,
            'combinedScore': self.combined_score,
        }


@dataclass(frozen=True)
class RecognitionResult:
    score: float
    recognized_text: Optional[str]
    shape_analysis: ShapeAnalysis
    text_score: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'score', clamp01(self.score))
        object.__setattr__(self, 'text_score', clamp01(self.text_score))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'recognizedText': self.recognized_text,
            'shapeAnalysis': self.shape_analysis.to_dict(),
        }


# ---- Arabic reference data ----
@dataclass(frozen=True, eq=False)
class DiacriticInfo:
    character: str
    name: str
    name_ar: str
    explanation: str
    explanation_fr: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiacriticInfo):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True)
class LetterWithDiacritics:
    letter_id: int
    base_character: str
    diacritics: str

    @property
    def full_character(self) -> str:
        return self.base_character + self.diacritics


class FormType(str, Enum):
    ISOLATED = 'isolated'
    INITIAL = 'initial'
    MEDIAL = 'medial'
    FINAL = 'final'


@dataclass(frozen=True)
class LetterEntry:
    name: str
    id: int
    forms: Tuple[Tuple[FormType, str], ...]

    @property
    def isolated(self) -> str:
        return dict(self.forms)[FormType.ISOLATED]


@dataclass(frozen=True)
class GlyphBoundingBox:
    letter: str
    form_type: str
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2

    @property
    def center_y(self) -> float:
        return (self.min_y + self.max_y) / 2

    def describe(self) -> str:
        return (f'[{self.form_type}] "{self.letter}" -> minX={self.min_x:.3f} maxX={self.max_x:.3f} '
                f'minY={self.min_y:.3f} maxY={self.max_y:.3f} (w={self.width:.3f} h={self.height:.3f})')
