"""
Core models for the auditor

Defines the dataclasses exchanged between the scanner, classifier, scorer,
checker and report generator. Dictionaries produced by ``to_dict`` keep the
camelCase keys used by persisted reports and the HTTP API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import AuditorError


SEVERITY_BUCKETS = ("critical", "serious", "moderate", "minor")

ENGINE_SEVERITY_TO_BUCKET = {
    "error": "critical",
    "warning": "serious",
    "notice": "moderate",
    "info": "minor",
}
DEFAULT_BUCKET = "minor"

STATUS_PASSED = "PASSED"
STATUS_FAILED = "FAILED"

WCAG_LEVELS = ("A", "AA", "AAA")


@dataclass
class RawFinding:
    """A single rule violation as reported by the scanning engine.

    `type` is the engine severity (error|warning|notice|info); any other value
    is accepted and later classified as minor.
    """

    code: str
    type: str
    message: str
    selector: Optional[str] = None
    context: Optional[str] = None
    runner: str = "axe"

    def __post_init__(self) -> None:
        self.type = self.type or ""
        self.code = self.code or ""
        self.message = self.message or ""
        if self.selector == "":
            self.selector = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawFinding":
        """Build a finding from a pa11y-style issue dictionary."""
        return cls(
            code=data.get("code") or data.get("ruleCode") or "",
            type=data.get("type") or data.get("engineSeverity") or "",
            message=data.get("message", ""),
            selector=data.get("selector"),
            context=data.get("context"),
            runner=data.get("runner", "axe"),
        )


@dataclass(frozen=True)
class Issue:
    """A finding after severity classification and WCAG enrichment."""

    code: str
    message: str
    type: str
    selector: Optional[str]
    wcag_level: str
    wcag_criteria: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "type": self.type,
            "selector": self.selector,
            "wcagLevel": self.wcag_level,
            "wcagCriteria": self.wcag_criteria,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            code=data.get("code", ""),
            message=data.get("message", ""),
            type=data.get("type", ""),
            selector=data.get("selector"),
            wcag_level=data.get("wcagLevel", "AA"),
            wcag_criteria=data.get("wcagCriteria", ""),
        )


@dataclass(frozen=True)
class IssueSet:
    """Issues grouped by severity bucket, in engine emission order."""

    critical: Tuple[Issue, ...] = ()
    serious: Tuple[Issue, ...] = ()
    moderate: Tuple[Issue, ...] = ()
    minor: Tuple[Issue, ...] = ()

    def buckets(self) -> Iterator[Tuple[str, Tuple[Issue, ...]]]:
        """Yield (bucket name, issues) from critical down to minor."""
        for name in SEVERITY_BUCKETS:
            yield name, getattr(self, name)

    def __len__(self) -> int:
        return sum(len(issues) for _, issues in self.buckets())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: [issue.to_dict() for issue in issues] for name, issues in self.buckets()}

    @classmethod
    def from_dict(cls, data: Dict[str, List[Dict[str, Any]]]) -> "IssueSet":
        data = data or {}
        return cls(**{
            name: tuple(Issue.from_dict(item) for item in data.get(name, []))
            for name in SEVERITY_BUCKETS
        })


@dataclass(frozen=True)
class Summary:
    total: int = 0
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0

    @classmethod
    def from_issue_set(cls, issues: IssueSet) -> "Summary":
        counts = {name: len(bucket) for name, bucket in issues.buckets()}
        return cls(total=sum(counts.values()), **counts)

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
        }


def _is_compliance_report(report: Any) -> bool:
    if not isinstance(report, dict):
        return False
    if not isinstance(report.get("auditResults"), dict):
        return False
    if not isinstance(report.get("configuration", {}), dict):
        return False

    issues = report.get("issues")
    if not isinstance(issues, dict):
        return False
    for name in SEVERITY_BUCKETS:
        bucket = issues.get(name, [])
        if not isinstance(bucket, list) or not all(isinstance(item, dict) for item in bucket):
            return False
    return True


@dataclass(frozen=True)
class AuditResult:
    """Outcome of a single audit; the unit exchanged downstream.

    `status` is the scorer's advisory verdict. The authoritative deployment
    gate is `ComplianceResult.passed`; the two can disagree.
    """

    url: str
    timestamp: str  # ISO8601 string
    wcag_level: str
    wcag_version: str
    issues: IssueSet
    summary: Summary
    status: str
    compliance: int
    page_title: str = ""

    @property
    def passed(self) -> bool:
        return self.status == STATUS_PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "pageTitle": self.page_title,
            "timestamp": self.timestamp,
            "wcagLevel": self.wcag_level,
            "wcagVersion": self.wcag_version,
            "summary": self.summary.to_dict(),
            "issues": self.issues.to_dict(),
            "status": self.status,
            "compliance": self.compliance,
        }

    @classmethod
    def from_report(cls, report: Dict[str, Any]) -> "AuditResult":
        """Rebuild an audit result from a persisted JSON compliance report.

        Raises AuditorError when `report` does not have the report layout.
        """
        if not _is_compliance_report(report):
            raise AuditorError("Report is not a compliance report: missing auditResults or issues")

        audit = report["auditResults"]
        configuration = report.get("configuration") or {}
        issues = IssueSet.from_dict(report["issues"])
        try:
            compliance = int(audit.get("complianceScore", 0))
        except (TypeError, ValueError) as e:
            raise AuditorError(f"Report has an invalid complianceScore: {e}") from e

        return cls(
            url=audit.get("url", ""),
            page_title=audit.get("pageTitle", ""),
            timestamp=audit.get("timestamp", ""),
            wcag_level=configuration.get("wcagLevel", "AA"),
            wcag_version=configuration.get("wcagVersion", "2.1"),
            issues=issues,
            summary=Summary.from_issue_set(issues),
            status=audit.get("status", STATUS_FAILED),
            compliance=compliance,
        )


@dataclass(frozen=True)
class ComplianceCheck:
    metric: str
    current: int
    threshold: int
    passed: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "current": self.current,
            "threshold": self.threshold,
            "passed": self.passed,
            "message": self.message,
        }


@dataclass(frozen=True)
class ComplianceReport:
    summary: Tuple[str, ...]
    details: Tuple[ComplianceCheck, ...]
    all_checks_passed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": list(self.summary),
            "details": [check.to_dict() for check in self.details],
            "allChecksPassed": self.all_checks_passed,
        }


@dataclass(frozen=True)
class ComplianceResult:
    """Threshold check outcome; `passed` drives the process exit code."""

    passed: bool
    checks: Dict[str, ComplianceCheck]
    timestamp: str
    report: ComplianceReport
    compliance_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
            "complianceScore": self.compliance_score,
            "timestamp": self.timestamp,
            "report": self.report.to_dict(),
        }


@dataclass
class ScanOutput:
    """What the scan adapter hands back to the auditor."""

    findings: List[RawFinding] = field(default_factory=list)
    page_title: str = ""
