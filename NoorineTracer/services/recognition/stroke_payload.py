"""Evaluate serialized strokes sent by a companion device.

A request message looks like::

    {"expectedLetter": "ب", "strokes": [[{"x": 10.0, "y": 20.0}, ...], ...]}

and the reply is ``{"success": bool, "score": float}``. Malformed messages get
a failing reply instead of an exception, since the sender has no way to react
to one.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from NoorineTracer.core.models import Point
from NoorineTracer.services.rendering.rasterize import GlyphRenderer, render_strokes

logger = logging.getLogger(__name__)

CANVAS_SIZE = 300
LINE_WIDTH = 12
REFERENCE_FONT_SIZE = 200
SUCCESS_SCORE = 0.5

FAILED_REPLY: Dict[str, Any] = {'success': False, 'score': 0.0}


def parse_strokes(serialized: Any) -> Optional[List[List[Point]]]:
    """Parse a list of strokes of ``{"x", "y"}`` dicts or ``[x, y]`` pairs.

    Missing coordinates default to 0, as the sender omits zero values.
    Returns None when the structure is not a list of point lists or a
    coordinate is not a finite number.
    """
    if not isinstance(serialized, list):
        return None
    strokes: List[List[Point]] = []
    for stroke in serialized:
        if not isinstance(stroke, list):
            return None
        points: List[Point] = []
        for p in stroke:
            if isinstance(p, dict):
                raw = (p.get('x', 0.0), p.get('y', 0.0))
            elif isinstance(p, (list, tuple)) and len(p) == 2:
                raw = p
            else:
                return None
            try:
                x, y = float(raw[0]), float(raw[1])
            except (TypeError, ValueError):
                return None
            if not (math.isfinite(x) and math.isfinite(y)):
                return None
            points.append((x, y))
        strokes.append(points)
    return strokes


def handle_evaluation_request(message: Dict[str, Any], engine, renderer: GlyphRenderer | None = None) -> Dict[str, Any]:
    expected = message.get('expectedLetter') if isinstance(message, dict) else None
    strokes = parse_strokes(message.get('strokes')) if isinstance(message, dict) else None
    if not isinstance(expected, str) or not expected or strokes is None:
        logger.warning('Rejected malformed evaluation request: %r', message)
        return dict(FAILED_REPLY)

    renderer = renderer or GlyphRenderer()
    user = render_strokes(strokes, CANVAS_SIZE, line_width=LINE_WIDTH)
    reference = renderer.render_reference(expected, CANVAS_SIZE, font_size=REFERENCE_FONT_SIZE)
    result = engine.evaluate(user, reference, expected)
    return {'success': result.score >= SUCCESS_SCORE, 'score': result.score}
