"""Tests for the command line scorer."""

import json

from main import SAMPLE_ANSWERS, main, score_assessment


def test_sample_answers_score(capsys):
    assert main([]) == 0
    output = json.loads(capsys.readouterr().out)
    assert 0 <= output["overall"] <= 100
    assert output == score_assessment(SAMPLE_ANSWERS)


def test_answers_file(tmp_path, capsys):
    path = tmp_path / "answers.json"
    path.write_text(json.dumps({"exit_timeline": "Within 12 months"}))

    assert main([str(path)]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["overall"] == 40


def test_missing_file():
    assert main(["/nonexistent/answers.json"]) == 1


def test_malformed_answers(tmp_path):
    path = tmp_path / "answers.json"
    path.write_text(json.dumps({"emotional_readiness": "very ready"}))
    assert main([str(path)]) == 1
