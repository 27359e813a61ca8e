"""Tests for report artifacts."""

import io
import json

from repo_outdated.pipeline import AuditResult, RunStage
from repo_outdated.store.output import ReportWriter


def _result(repo_info, **kwargs):
    return AuditResult(repository=repo_info, stage=RunStage.PARSED, **kwargs)


def test_write_parsed_report(tmp_path, repo_info):
    writer = ReportWriter(tmp_path / "out")
    path = writer.write(_result(repo_info, parsed=True, payload={"installed": []}))

    assert path == tmp_path / "out" / "billing.json"
    assert json.loads(path.read_text()) == {"installed": []}


def test_write_raw_output(tmp_path, repo_info):
    writer = ReportWriter(tmp_path)
    path = writer.write(_result(repo_info, payload="PHP Fatal error"))

    assert path.name == "billing.raw.txt"
    assert path.read_text() == "PHP Fatal error"


def test_write_to_stdout(tmp_path, repo_info):
    stream = io.StringIO()
    writer = ReportWriter(tmp_path, to_stdout=True, stream=stream)

    assert writer.write(_result(repo_info, parsed=True, payload={"installed": []})) is None
    line = json.loads(stream.getvalue())
    assert line == {"repository": "billing", "report": {"installed": []}}
    assert not (tmp_path / "billing.json").exists()


def test_write_summary(tmp_path, repo_info):
    writer = ReportWriter(tmp_path)
    ok = _result(repo_info, parsed=True, payload={"installed": [{"name": "a/b"}]})
    bad = _result(repo_info, errors=["composer install exited with 1"])

    path = writer.write_summary([ok, bad], status="completed")
    summary = json.loads(path.read_text())

    assert summary["status"] == "completed"
    assert summary["repositories"] == 2
    assert summary["failed"] == 1
    assert summary["results"][0]["outdated"] == 1
    assert summary["results"][1]["errors"] == ["composer install exited with 1"]
