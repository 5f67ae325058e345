"""
Compliance Checker - Validates audit results against thresholds
Used in CI/CD pipelines to determine pass/fail
"""

import logging
from datetime import datetime
from typing import Optional

from .errors import NotificationError
from .model import AuditResult, ComplianceCheck, ComplianceReport, ComplianceResult
from .notifier import WebhookNotifier, build_message
from .scorer import exceeds_thresholds


CHECK_ORDER = ("criticalIssues", "seriousIssues", "moderateIssues", "wcagCompliance")


def threshold_message(metric: str, current: int, threshold: int, passed: bool) -> str:
    symbol, verdict = ("✓", "within") if passed else ("✗", "exceed")
    return f"{symbol} {metric} {verdict} threshold ({current}/{threshold})"


def _threshold_check(metric: str, current: int, threshold: int) -> ComplianceCheck:
    passed = current <= threshold
    return ComplianceCheck(
        metric=metric,
        current=current,
        threshold=threshold,
        passed=passed,
        message=threshold_message(metric, current, threshold, passed),
    )


class ComplianceChecker:
    """Re-validates an audit summary against the configured maxima.

    `check` is a pure function of the audit result and settings. Its `passed`
    flag is authoritative for deployment gating and may differ from the
    scorer's `AuditResult.status`.
    """

    def __init__(self, settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def check(self, audit: AuditResult, checked_at: Optional[str] = None) -> ComplianceResult:
        checks = {
            "criticalIssues": self._check_critical_issues(audit),
            "seriousIssues": self._check_serious_issues(audit),
            "moderateIssues": self._check_moderate_issues(audit),
            "wcagCompliance": self._check_wcag_compliance(audit),
        }

        passed = self._determine_overall_pass(checks)

        self.logger.info(
            f"Compliance check completed - passed: {passed}, "
            f"critical: {checks['criticalIssues'].passed}, "
            f"serious: {checks['seriousIssues'].passed}, "
            f"score: {audit.compliance}%"
        )

        return ComplianceResult(
            passed=passed,
            checks=checks,
            timestamp=checked_at or audit.timestamp,
            report=self._generate_compliance_report(checks),
            compliance_score=audit.compliance,
        )

    def _check_critical_issues(self, audit: AuditResult) -> ComplianceCheck:
        return _threshold_check("Critical issues", audit.summary.critical, self.settings.max_critical_issues)

    def _check_serious_issues(self, audit: AuditResult) -> ComplianceCheck:
        return _threshold_check("Serious issues", audit.summary.serious, self.settings.max_serious_issues)

    def _check_moderate_issues(self, audit: AuditResult) -> ComplianceCheck:
        return _threshold_check("Moderate issues", audit.summary.moderate, self.settings.max_moderate_issues)

    def _check_wcag_compliance(self, audit: AuditResult) -> ComplianceCheck:
        # Zero tolerance regardless of max_critical_issues
        metric = f"WCAG {self.settings.wcag_version} Level {self.settings.wcag_level} compliance"
        return _threshold_check(metric, audit.summary.critical, 0)

    def _determine_overall_pass(self, checks) -> bool:
        failed = exceeds_thresholds(
            checks["criticalIssues"].current,
            checks["seriousIssues"].current,
            checks["criticalIssues"].threshold,
            checks["seriousIssues"].threshold,
            self.settings.fail_on_serious,
        )
        return not failed

    def _generate_compliance_report(self, checks) -> ComplianceReport:
        ordered = tuple(checks[name] for name in CHECK_ORDER)
        return ComplianceReport(
            summary=tuple(check.message for check in ordered),
            details=ordered,
            all_checks_passed=all(check.passed for check in ordered),
        )

    async def notify_ci(self,
                        result: ComplianceResult,
                        audit: AuditResult,
                        notifier: Optional[WebhookNotifier] = None) -> bool:
        """Send the result to the CI/CD webhook (Slack, Teams, etc.).

        Returns True when a notification was delivered. Failures are logged
        and never raised.
        """
        if notifier is None:
            if not self.settings.notification_webhook:
                self.logger.info("No notification webhook configured")
                return False
            notifier = WebhookNotifier(
                self.settings.notification_webhook,
                timeout=self.settings.notification_timeout,
            )

        message = build_message(result, audit, self.settings, sent_at=datetime.now())
        try:
            await notifier.send(message)
        except NotificationError as e:
            self.logger.error(f"Failed to send notification: {e}")
            return False

        self.logger.info("Notification sent to webhook")
        return True
