"""
Tests for the command-line interface
"""

import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from auditor.cli import app


runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run commands from an empty directory with reports under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REPORT_OUTPUT_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "audit.log"))
    yield tmp_path

    logger = logging.getLogger("auditor")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def write_findings(path, findings):
    path.write_text(json.dumps(findings), encoding="utf-8")
    return str(path)


class TestAuditCommand:

    def test_requires_url(self, workdir):
        result = runner.invoke(app, ["audit", "--no-notify"])
        assert result.exit_code == 1
        assert "CONFIGURATION ERROR" in result.output
        assert "AUDIT_URL" in result.output

    def test_passing_audit(self, workdir):
        findings = write_findings(workdir / "findings.json", [
            {"code": "color-contrast", "type": "warning", "message": "Low contrast"},
        ])
        result = runner.invoke(app, ["audit", "--url", "https://example.com", "--findings", findings, "--no-notify"])

        assert result.exit_code == 0, result.output
        assert "AUDIT PASSED" in result.output
        assert list((workdir / "reports").glob("compliance-report-*.json"))

    def test_failing_audit(self, workdir):
        findings = write_findings(workdir / "findings.json", [
            {"code": "image-alt", "type": "error", "message": "Missing alt"},
        ])
        result = runner.invoke(app, ["audit", "--url", "https://example.com", "--findings", findings, "--no-notify"])

        assert result.exit_code == 1
        assert "AUDIT FAILED" in result.output

    def test_url_from_environment(self, workdir, monkeypatch):
        monkeypatch.setenv("AUDIT_URL", "https://env.example.com")
        findings = write_findings(workdir / "findings.json", [])
        result = runner.invoke(app, ["audit", "--findings", findings, "--no-notify"])

        assert result.exit_code == 0, result.output
        assert "https://env.example.com" in result.output

    def test_unreadable_findings(self, workdir):
        result = runner.invoke(app, [
            "audit", "--url", "https://example.com", "--findings", str(workdir / "missing.json"), "--no-notify",
        ])
        assert result.exit_code == 1
        assert "AUDIT ERROR" in result.output

    def test_invalid_configuration(self, workdir, monkeypatch):
        monkeypatch.setenv("WCAG_LEVEL", "Z")
        result = runner.invoke(app, ["audit", "--url", "https://example.com"])
        assert result.exit_code == 1
        assert "CONFIGURATION ERROR" in result.output


class TestCheckCommand:

    def test_no_reports(self, workdir):
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "Run audit first" in result.output

    def test_check_after_demo(self, workdir):
        assert runner.invoke(app, ["demo"]).exit_code == 0

        result = runner.invoke(app, ["check"])
        assert result.exit_code == 0, result.output
        assert "PASSED" in result.output

    def test_check_uses_current_thresholds(self, workdir, monkeypatch):
        assert runner.invoke(app, ["demo"]).exit_code == 0

        monkeypatch.setenv("FAIL_ON_SERIOUS", "true")
        monkeypatch.setenv("MAX_SERIOUS_ISSUES", "1")
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "FAILED" in result.output

    @pytest.mark.parametrize("content", [{}, {"unrelated": True}, [], {"auditResults": {}, "issues": {"critical": "x"}}])
    def test_malformed_report(self, workdir, content):
        reports = workdir / "reports"
        reports.mkdir()
        (reports / "compliance-report-2099-01-01.json").write_text(json.dumps(content), encoding="utf-8")

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "COMPLIANCE CHECK ERROR" in result.output
        assert "not a compliance report" in result.output


class TestOtherCommands:

    def test_demo(self, workdir):
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0, result.output
        assert "78%" in result.output
        assert len(list((workdir / "reports").iterdir())) == 2

    def test_demo_unexpected_error(self, workdir):
        with patch("auditor.cli.run_pipeline", side_effect=RuntimeError("disk on fire")):
            result = runner.invoke(app, ["demo"])

        assert result.exit_code == 1
        assert "DEMO ERROR" in result.output
        assert "disk on fire" in result.output

    def test_thresholds(self, workdir, monkeypatch):
        monkeypatch.setenv("MAX_MODERATE_ISSUES", "7")
        result = runner.invoke(app, ["thresholds"])
        assert result.exit_code == 0
        assert "maxModerateIssues" in result.output
        assert "7" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "v1.0.0" in result.output
