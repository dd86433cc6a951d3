"""Geometric comparison of a traced drawing against a reference glyph.

Both bitmaps are reduced to a small square grid with area interpolation, which
keeps the comparison cheap and independent of canvas resolution. Three scores
come out of the grid pair:

- bounding-box match: aspect ratio and centre position of the ink boxes
- stroke coverage: share of reference ink the user's strokes landed on
- overflow penalty: share of user ink that falls outside the reference

Reference ink uses the stricter `ink_threshold`; whether a user stroke landed on
a cell uses the looser `cover_threshold` so imprecise tracing still counts.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from NoorineTracer.core.config import ShapeConfig
from NoorineTracer.core.models import RasterBitmap, ShapeAnalysis

logger = logging.getLogger(__name__)

# (min_x, min_y, width, height) in grid cells
GridBox = Tuple[int, int, int, int]


def to_grid(bitmap: RasterBitmap, grid_size: int) -> np.ndarray:
    """Downsample a bitmap to a `grid_size` x `grid_size` uint8 grid."""
    if grid_size <= 0:
        raise ValueError(f'grid_size must be positive, got {grid_size}')
    pixels = bitmap.pixels
    if pixels.shape == (grid_size, grid_size):
        return pixels
    return cv2.resize(pixels, (grid_size, grid_size), interpolation=cv2.INTER_AREA)


def _check_same_shape(user: np.ndarray, ref: np.ndarray) -> None:
    if user.shape != ref.shape:
        raise ValueError(f'Grid shape mismatch: user {user.shape} vs reference {ref.shape}')


def find_bounding_box(grid: np.ndarray, threshold: int = 50) -> Optional[GridBox]:
    ys, xs = np.nonzero(grid > threshold)
    if xs.size == 0:
        return None
    min_x, max_x = int(xs.min()), int(xs.max())
    min_y, max_y = int(ys.min()), int(ys.max())
    return (min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


def bounding_box_match(user: np.ndarray, ref: np.ndarray, threshold: int = 50) -> float:
    _check_same_shape(user, ref)
    user_box = find_bounding_box(user, threshold)
    ref_box = find_bounding_box(ref, threshold)
    if user_box is None or ref_box is None:
        return 0.0

    grid_size = user.shape[1]
    ux, uy, uw, uh = user_box
    rx, ry, rw, rh = ref_box

    user_ratio = uw / max(1, uh)
    ref_ratio = rw / max(1, rh)
    ratio_score = max(0.0, 1.0 - abs(user_ratio - ref_ratio) * 0.5)

    # centres snap to whole cells
    ucx = (ux + uw // 2) / grid_size
    ucy = (uy + uh // 2) / grid_size
    rcx = (rx + rw // 2) / grid_size
    rcy = (ry + rh // 2) / grid_size
    center_dist = math.hypot(ucx - rcx, ucy - rcy)
    position_score = max(0.0, 1.0 - center_dist * 2)

    return (ratio_score + position_score) / 2


def stroke_coverage(user: np.ndarray, ref: np.ndarray, threshold: int = 50, cover_threshold: int = 30) -> float:
    _check_same_shape(user, ref)
    ref_ink = ref > threshold
    ref_count = int(ref_ink.sum())
    if ref_count == 0:
        return 0.0
    covered = int((ref_ink & (user > cover_threshold)).sum())
    return covered / ref_count


def overflow_penalty(user: np.ndarray, ref: np.ndarray, threshold: int = 50) -> float:
    _check_same_shape(user, ref)
    user_ink = user > threshold
    user_count = int(user_ink.sum())
    if user_count == 0:
        return 0.0
    outside = int((user_ink & (ref <= threshold)).sum())
    return outside / user_count


def analyze_shape(user_bitmap: RasterBitmap, reference_bitmap: RasterBitmap,
                  config: ShapeConfig | None = None) -> ShapeAnalysis:
    cfg = config or ShapeConfig()
    user = to_grid(user_bitmap, cfg.grid_size)
    ref = to_grid(reference_bitmap, cfg.grid_size)

    analysis = ShapeAnalysis(
        bounding_box_match=bounding_box_match(user, ref, cfg.ink_threshold),
        stroke_coverage=stroke_coverage(user, ref, cfg.ink_threshold, cfg.cover_threshold),
        overflow_penalty=overflow_penalty(user, ref, cfg.ink_threshold),
        coverage_weight=cfg.coverage_weight,
        bounding_weight=cfg.bounding_weight,
        overflow_weight=cfg.overflow_weight,
    )
    logger.debug(
        'Shape analysis: bbox=%.3f coverage=%.3f overflow=%.3f combined=%.3f',
        analysis.bounding_box_match, analysis.stroke_coverage,
        analysis.overflow_penalty, analysis.combined_score,
    )
    return analysis
