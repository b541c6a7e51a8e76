# ============================================================================
# FILE: tests/unit/test_cli.py
# ============================================================================
"""
Unit tests for the command line entry point
"""

import json

import pytest

from report_simplifier import cli


@pytest.fixture
def run_cli(monkeypatch, make_pipeline):
    """Runs cli.main with a test pipeline and no logging reconfiguration"""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)

    def _run(argv, pipeline=None):
        pipeline = pipeline or make_pipeline()
        monkeypatch.setattr(cli, "ReportPipeline", lambda: pipeline)
        return cli.main(argv)
    return _run


def test_process_text(run_cli, capsys, sample_report_text):
    exit_code = run_cli(["process", "--text", sample_report_text])

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert output["status"] == "ok"
    assert [t["name"] for t in output["tests"]] == ["Hemoglobin", "WBC"]


def test_process_unprocessed(run_cli, capsys):
    exit_code = run_cli(["process", "--text", "short"])

    assert exit_code == 2
    assert json.loads(capsys.readouterr().out)["status"] == "unprocessed"


def test_process_text_file(run_cli, capsys, tmp_path, normal_report_text):
    report = tmp_path / "report.txt"
    report.write_text(normal_report_text, encoding="utf-8")

    assert run_cli(["process", "--text-file", str(report)]) == 0
    assert json.loads(capsys.readouterr().out)["explanations"] == []


def test_process_image(run_cli, capsys, tmp_path, make_pipeline, fake_ocr, sample_report_text):
    image = tmp_path / "report.png"
    image.write_bytes(b"\x89PNG fake")
    pipeline = make_pipeline(ocr_engine=fake_ocr(text=sample_report_text))

    assert run_cli(["process", "--image", str(image)], pipeline) == 0


def test_empty_text_is_error(run_cli, capsys):
    exit_code = run_cli(["process", "--text", "   "])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out) == {
        "status": "error",
        "reason": "Either text or image content is required",
    }


def test_health(run_cli, capsys):
    exit_code = run_cli(["health"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out)["backend"] == "disabled"


def test_source_is_required():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["process"])
