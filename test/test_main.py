import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import json

import pytest

from NoorineTracer.main import build_parser, main


@pytest.fixture
def stub_backend(monkeypatch, tmp_path):
    monkeypatch.setenv('OCR_BACKEND', 'stub')
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_evaluate_prints_json_result(stub_backend, capsys):
    strokes = stub_backend / 'attempt.json'
    strokes.write_text(json.dumps([[[150, 60], [150, 240]]]), encoding='utf-8')
    code = main(['evaluate', '--strokes', str(strokes), '--letter', 'ا', '--json'])
    payload = json.loads(capsys.readouterr().out)
    assert code in (0, 1)
    assert payload['recognizedText'] is None
    assert payload['verdict'] in ('pass', 'almost', 'retry')
    assert 0.0 <= payload['score'] <= 1.0


def test_evaluate_rejects_malformed_strokes_file(stub_backend):
    strokes = stub_backend / 'attempt.json'
    strokes.write_text(json.dumps({'strokes': 'none'}), encoding='utf-8')
    assert main(['evaluate', '--strokes', str(strokes), '--letter', 'ب']) == 2
