"""
Issue Classifier
Maps raw engine findings into severity buckets and enriches them with WCAG data
"""

from typing import Dict, Iterable, List

from ..data.wcag import wcag_criteria_for, wcag_level_for
from .model import (
    DEFAULT_BUCKET,
    ENGINE_SEVERITY_TO_BUCKET,
    SEVERITY_BUCKETS,
    Issue,
    IssueSet,
    RawFinding,
    Summary,
)


def bucket_for(engine_severity: str) -> str:
    """Severity bucket for an engine severity; unknown values are minor."""
    return ENGINE_SEVERITY_TO_BUCKET.get(engine_severity, DEFAULT_BUCKET)


def to_issue(finding: RawFinding) -> Issue:
    return Issue(
        code=finding.code,
        message=finding.message,
        type=finding.type,
        selector=finding.selector,
        wcag_level=wcag_level_for(finding.code),
        wcag_criteria=wcag_criteria_for(finding.code),
    )


def classify(raw_findings: Iterable[RawFinding]) -> IssueSet:
    """Classify findings into an IssueSet, preserving emission order.

    Every finding lands in exactly one bucket; classification never fails.
    """
    buckets: Dict[str, List[Issue]] = {name: [] for name in SEVERITY_BUCKETS}

    for finding in raw_findings:
        buckets[bucket_for(finding.type)].append(to_issue(finding))

    return IssueSet(**{name: tuple(issues) for name, issues in buckets.items()})


def summarize(issues: IssueSet) -> Summary:
    return Summary.from_issue_set(issues)
