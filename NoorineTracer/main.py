"""Command line entry point.

    noorine-tracer evaluate --strokes attempt.json --letter ب
    noorine-tracer calibrate --out calibration.json

A strokes file is a JSON list of strokes, each a list of ``[x, y]`` pairs or
``{"x": .., "y": ..}`` objects in canvas coordinates.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from NoorineTracer.core.config import load_config
from NoorineTracer.core.models import Drawing
from NoorineTracer.services.data_prep.letter_sources import calibrate_all, save_calibration_json
from NoorineTracer.services.ocr import create_recognizer
from NoorineTracer.services.recognition import RecognitionEngine, grade
from NoorineTracer.services.recognition.stroke_payload import parse_strokes
from NoorineTracer.services.rendering.rasterize import GlyphRenderer, render_drawing

logger = logging.getLogger(__name__)


def _cmd_evaluate(args, cfg) -> int:
    with open(args.strokes, 'r', encoding='utf-8') as f:
        strokes = parse_strokes(json.load(f))
    if strokes is None:
        logger.error('%s is not a list of strokes', args.strokes)
        return 2

    canvas = args.canvas or cfg.render.canvas_size
    drawing = Drawing.from_points(strokes)
    renderer = GlyphRenderer.from_config(cfg.render)
    user = render_drawing(drawing, canvas, line_width=cfg.render.line_width)
    reference = renderer.render_reference(args.letter, canvas)

    with RecognitionEngine(create_recognizer(cfg), cfg) as engine:
        result = engine.evaluate(user, reference, args.letter)
    outcome = grade(result, cfg.grading)

    if args.json:
        payload = result.to_dict()
        payload['verdict'] = outcome.verdict.value
        payload['hint'] = outcome.hint.value if outcome.hint else None
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        shape = result.shape_analysis
        print(f'letter:     {args.letter}')
        print(f'recognized: {result.recognized_text or "-"}')
        print(f'score:      {result.score:.3f} ({outcome.verdict.value})')
        print(f'shape:      bbox={shape.bounding_box_match:.3f} coverage={shape.stroke_coverage:.3f} '
              f'overflow={shape.overflow_penalty:.3f} combined={shape.combined_score:.3f}')
        if outcome.hint:
            print(f'hint:       {outcome.hint.value}')
    return 0 if outcome.passed else 1


def _cmd_calibrate(args, cfg) -> int:
    boxes = calibrate_all(GlyphRenderer.from_config(cfg.render))
    if args.out:
        save_calibration_json(Path(args.out), boxes)
        print(f'Saved {len(boxes)} glyph boxes to {args.out}')
    else:
        for b in boxes:
            print(b.describe())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='noorine-tracer', description='Grade traced Arabic letters.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--env', default=None, help='Path to a .env file')
    sub = parser.add_subparsers(dest='command', required=True)

    ev = sub.add_parser('evaluate', help='Evaluate a strokes file against a letter')
    ev.add_argument('--strokes', required=True, help='JSON file with the drawn strokes')
    ev.add_argument('--letter', required=True, help='Expected letter form')
    ev.add_argument('--canvas', type=int, default=None, help='Canvas size in pixels')
    ev.add_argument('--json', action='store_true', help='Print the result as JSON')

    cal = sub.add_parser('calibrate', help='Measure glyph bounding boxes for every letter form')
    cal.add_argument('--out', default=None, help='Output JSON file')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    cfg = load_config(args.env)
    if args.command == 'evaluate':
        return _cmd_evaluate(args, cfg)
    return _cmd_calibrate(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
