import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from NoorineTracer.core.models import RasterBitmap, RecognitionResult, ShapeAnalysis
from NoorineTracer.services.recognition.stroke_payload import handle_evaluation_request, parse_strokes


class RecordingEngine:
    def __init__(self, score):
        self.score = score
        self.calls = []

    def evaluate(self, user, reference, expected):
        self.calls.append((user, reference, expected))
        return RecognitionResult(self.score, None, ShapeAnalysis.empty())


class BlankRenderer:
    def __init__(self):
        self.font_sizes = []

    def render_reference(self, letter, size, font_size=None, font=None):
        self.font_sizes.append(font_size)
        return RasterBitmap.blank(size)


def test_parse_strokes_accepts_dicts_and_pairs():
    strokes = parse_strokes([[{"x": 1, "y": 2}, {"y": 3}], [[4, 5]]])
    assert strokes == [[(1.0, 2.0), (0.0, 3.0)], [(4.0, 5.0)]]


def test_parse_strokes_rejects_bad_structure():
    assert parse_strokes(None) is None
    assert parse_strokes([{"x": 1}]) is None
    assert parse_strokes([[{"x": "left", "y": 0}]]) is None
    assert parse_strokes([[[1, 2, 3]]]) is None


def test_parse_strokes_rejects_non_finite_coordinates():
    assert parse_strokes([[{"x": float("inf"), "y": 1.0}]]) is None
    assert parse_strokes([[{"x": 5.0, "y": float("nan")}]]) is None
    assert parse_strokes([[[float("-inf"), 0.0]]]) is None


def test_parse_strokes_rejects_strings_as_points():
    assert parse_strokes([["12"]]) is None
    assert parse_strokes([[[1, 2], "xy"]]) is None
    assert parse_strokes([[(1, 2)]]) == [[(1.0, 2.0)]]


def test_non_finite_request_fails_without_evaluating():
    engine = RecordingEngine(1.0)
    message = {"expectedLetter": "ب",
               "strokes": [[{"x": float("inf"), "y": 1.0}, {"x": 5.0, "y": float("nan")}]]}
    assert handle_evaluation_request(message, engine, BlankRenderer()) == {"success": False, "score": 0.0}
    assert engine.calls == []


def test_successful_request():
    engine = RecordingEngine(0.75)
    renderer = BlankRenderer()
    message = {"expectedLetter": "ب", "strokes": [[{"x": 100.0, "y": 150.0}, {"x": 200.0, "y": 150.0}]]}
    reply = handle_evaluation_request(message, engine, renderer)
    assert reply == {"success": True, "score": 0.75}

    user, reference, expected = engine.calls[0]
    assert expected == "ب"
    assert user.shape == (300, 300)
    assert user.pixels[150, 150] == 255
    assert renderer.font_sizes == [200]


def test_low_score_reply_is_not_success():
    reply = handle_evaluation_request({"expectedLetter": "ب", "strokes": []}, RecordingEngine(0.2), BlankRenderer())
    assert reply == {"success": False, "score": 0.2}


def test_malformed_requests_fail_without_evaluating():
    engine = RecordingEngine(1.0)
    for message in ({}, {"strokes": []}, {"expectedLetter": "ب"},
                    {"expectedLetter": "", "strokes": []}, {"expectedLetter": "ب", "strokes": "oops"}, None):
        assert handle_evaluation_request(message, engine, BlankRenderer()) == {"success": False, "score": 0.0}
    assert engine.calls == []
