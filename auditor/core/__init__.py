"""
Auditor Core Components
Classification, scoring, threshold checking and scan adapters
"""

from .auditor import AccessibilityAuditor
from .checker import ComplianceChecker
from .classifier import classify
from .model import AuditResult, ComplianceResult, Issue, IssueSet, RawFinding, Summary
from .scanner import AxeScanner, ScanAdapter, StaticScanner
from .scorer import score

__all__ = [
    "AccessibilityAuditor",
    "ComplianceChecker",
    "classify",
    "score",
    "AuditResult",
    "ComplianceResult",
    "Issue",
    "IssueSet",
    "RawFinding",
    "Summary",
    "AxeScanner",
    "ScanAdapter",
    "StaticScanner",
]
