"""Configuration schema.

Dataclass sections with defaults matching the tuned values of the tracing
trainer. `load_config()` layers a `.env` file and environment variables on top.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass
class OCRConfig:
    backend: Optional[str] = None  # None: try tesseract, fall back to stub
    language: str = "ara"
    tesseract_cmd: Optional[str] = None
    psm: int = 10  # single character
    oem: int = 3
    timeout_s: float = 5.0


@dataclass
class RenderConfig:
    canvas_size: int = 300
    line_width: int = 12
    font_path: Optional[str] = None
    font_scale: float = 0.65  # reference font size relative to canvas


@dataclass
class ShapeConfig:
    grid_size: int = 20
    ink_threshold: int = 50
    cover_threshold: int = 30
    coverage_weight: float = 0.5
    bounding_weight: float = 0.3
    overflow_weight: float = 0.2


@dataclass
class FusionConfig:
    # Hand-tuned; keep in sync with the trainer's grading thresholds.
    high_text_score: float = 0.7
    weak_text_score: float = 0.5
    wrong_letter_factor: float = 0.3
    shape_only_factor: float = 0.8
    min_coverage: float = 0.3
    max_overflow: float = 0.5
    overflow_factor: float = 0.5


@dataclass
class GradingConfig:
    required_score: float = 0.5
    almost_ratio: float = 0.6
    low_coverage: float = 0.4
    high_overflow: float = 0.4


@dataclass
class AppConfig:
    ocr: OCRConfig = field(default_factory=OCRConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    shape: ShapeConfig = field(default_factory=ShapeConfig)
    fusion: FusionConfig = field(default_factory=FusionConfig)
    grading: GradingConfig = field(default_factory=GradingConfig)


def _env_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_config(dotenv_path: str | None = None) -> AppConfig:
    """Build an `AppConfig` from defaults, a `.env` file and the environment.

    Environment variables already set win over values from the `.env` file.
    """
    load_dotenv(dotenv_path)
    cfg = AppConfig()

    backend = os.getenv('OCR_BACKEND')
    if backend:
        cfg.ocr.backend = backend.strip().lower()
    cfg.ocr.tesseract_cmd = os.getenv('TESSERACT_CMD') or cfg.ocr.tesseract_cmd
    cfg.ocr.language = os.getenv('OCR_LANGUAGE') or cfg.ocr.language
    cfg.ocr.timeout_s = _env_number('OCR_TIMEOUT', float, cfg.ocr.timeout_s)

    cfg.render.font_path = os.getenv('NOORINE_FONT_PATH') or cfg.render.font_path
    cfg.render.canvas_size = _env_number('NOORINE_CANVAS_SIZE', int, cfg.render.canvas_size)
    cfg.shape.grid_size = _env_number('NOORINE_GRID_SIZE', int, cfg.shape.grid_size)

    logger.debug('Loaded config: %s', cfg)
    return cfg
