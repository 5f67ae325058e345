"""
Shared fixtures for the auditor test suite
"""

import pytest

from auditor.config import Settings
from auditor.core.classifier import classify
from auditor.core.model import AuditResult, RawFinding, Summary
from auditor.core.scorer import score


SEVERITY_TYPES = {
    "critical": "error",
    "serious": "warning",
    "moderate": "notice",
    "minor": "info",
}


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and writing into tmp_path."""
    return Settings(
        _env_file=None,
        report_output_dir=str(tmp_path / "reports"),
        log_file=str(tmp_path / "logs" / "audit.log"),
    )


def findings_for(critical=0, serious=0, moderate=0, minor=0):
    counts = {"critical": critical, "serious": serious, "moderate": moderate, "minor": minor}
    findings = []
    for bucket, count in counts.items():
        for i in range(count):
            findings.append(RawFinding(
                code="image-alt" if bucket == "critical" else "color-contrast",
                type=SEVERITY_TYPES[bucket],
                message=f"{bucket} issue {i}",
                selector=f"#{bucket}-{i}",
            ))
    return findings


@pytest.fixture
def make_audit(settings):
    """Factory building an AuditResult with the given bucket counts."""

    def _make(critical=0, serious=0, moderate=0, minor=0, url="https://example.com", audit_settings=None):
        audit_settings = audit_settings or settings
        issues = classify(findings_for(critical, serious, moderate, minor))
        scored = score(issues, audit_settings)
        return AuditResult(
            url=url,
            timestamp="2024-01-15T10:30:00+00:00",
            wcag_level=audit_settings.wcag_level,
            wcag_version=audit_settings.wcag_version,
            issues=issues,
            summary=Summary.from_issue_set(issues),
            status=scored.status,
            compliance=scored.compliance,
            page_title="Test Page",
        )

    return _make


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep auditor variables from the host environment out of Settings."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    for alias in ("APP_ENV", "AUDIT_INCLUDE_SELECTORS", "AUDIT_WAIT_MS"):
        monkeypatch.delenv(alias, raising=False)
