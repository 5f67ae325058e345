"""
Compliance Scorer
Weighted 0-100 compliance score and the advisory PASSED/FAILED status
"""

from dataclasses import dataclass

from .model import STATUS_FAILED, STATUS_PASSED, IssueSet, Summary


# Penalty points per issue in each bucket
SEVERITY_WEIGHTS = {
    "critical": 100,
    "serious": 50,
    "moderate": 20,
    "minor": 5,
}
MAX_POINTS_PER_ISSUE = 100


@dataclass(frozen=True)
class ScoreResult:
    status: str
    compliance: int


def calculate_compliance(summary: Summary) -> int:
    """Compliance percentage, rounded half-up to the nearest integer."""
    if summary.total == 0:
        return 100

    points = sum(getattr(summary, bucket) * weight for bucket, weight in SEVERITY_WEIGHTS.items())
    max_points = summary.total * MAX_POINTS_PER_ISSUE
    remaining = max_points - points

    # round(remaining / max_points * 100) with exact integer half-up rounding
    return (2 * 100 * remaining + max_points) // (2 * max_points)


def exceeds_thresholds(critical: int,
                       serious: int,
                       max_critical_issues: int,
                       max_serious_issues: int,
                       fail_on_serious: bool) -> bool:
    """Shared pass/fail rule used by both the scorer and the threshold checker."""
    if critical > max_critical_issues:
        return True
    if fail_on_serious and serious > max_serious_issues:
        return True
    return False


def determine_status(summary: Summary, settings) -> str:
    failed = exceeds_thresholds(
        summary.critical,
        summary.serious,
        settings.max_critical_issues,
        settings.max_serious_issues,
        settings.fail_on_serious,
    )
    return STATUS_FAILED if failed else STATUS_PASSED


def score(issues: IssueSet, settings) -> ScoreResult:
    summary = Summary.from_issue_set(issues)
    return ScoreResult(
        status=determine_status(summary, settings),
        compliance=calculate_compliance(summary),
    )
