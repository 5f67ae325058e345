"""
Tests for the compliance threshold checker
"""

from unittest.mock import AsyncMock

import pytest

from auditor.core.checker import CHECK_ORDER, ComplianceChecker, threshold_message
from auditor.core.errors import NotificationError


class TestComplianceChecker:
    """Threshold checks and the overall deployment gate."""

    @pytest.fixture
    def strict_settings(self, settings):
        return settings.model_copy(update={"fail_on_serious": True})

    def test_scenario_within_thresholds(self, strict_settings, make_audit):
        audit = make_audit(serious=2, moderate=5, minor=10, audit_settings=strict_settings)
        result = ComplianceChecker(strict_settings).check(audit)

        assert result.passed is True
        assert result.checks["criticalIssues"].passed is True
        assert result.checks["seriousIssues"].passed is True
        assert result.compliance_score == 85

    def test_scenario_critical_issue_fails(self, strict_settings, make_audit):
        audit = make_audit(critical=1, serious=2, audit_settings=strict_settings)
        result = ComplianceChecker(strict_settings).check(audit)

        assert result.passed is False
        assert result.checks["criticalIssues"].passed is False

    def test_scenario_serious_over_limit_fails(self, strict_settings, make_audit):
        audit = make_audit(serious=10, audit_settings=strict_settings)
        result = ComplianceChecker(strict_settings).check(audit)

        assert result.passed is False
        assert result.checks["seriousIssues"].passed is False

    def test_serious_over_limit_passes_without_fail_on_serious(self, settings, make_audit):
        result = ComplianceChecker(settings).check(make_audit(serious=10))

        assert result.checks["seriousIssues"].passed is False
        assert result.passed is True
        assert result.report.all_checks_passed is False

    def test_moderate_check_does_not_gate(self, settings, make_audit):
        result = ComplianceChecker(settings).check(make_audit(moderate=16))

        assert result.checks["moderateIssues"].passed is False
        assert result.passed is True

    def test_wcag_compliance_is_zero_tolerance(self, settings, make_audit):
        lenient = settings.model_copy(update={"max_critical_issues": 2})
        result = ComplianceChecker(lenient).check(make_audit(critical=1, audit_settings=lenient))

        assert result.checks["criticalIssues"].passed is True
        assert result.checks["wcagCompliance"].passed is False
        assert result.checks["wcagCompliance"].threshold == 0
        assert result.passed is True
        assert result.report.all_checks_passed is False

    def test_deterministic(self, settings, make_audit):
        audit = make_audit(critical=1, serious=3, moderate=2, minor=1)
        checker = ComplianceChecker(settings)
        assert checker.check(audit) == checker.check(audit)
        assert checker.check(audit).timestamp == audit.timestamp

    def test_explicit_check_time(self, settings, make_audit):
        result = ComplianceChecker(settings).check(make_audit(), checked_at="2024-02-01T00:00:00+00:00")
        assert result.timestamp == "2024-02-01T00:00:00+00:00"

    @pytest.mark.parametrize("counts", [
        {},
        {"critical": 1},
        {"serious": 6},
        {"critical": 2, "serious": 9, "moderate": 20, "minor": 3},
    ])
    @pytest.mark.parametrize("fail_on_serious", [True, False])
    def test_overall_pass_invariant(self, settings, make_audit, counts, fail_on_serious):
        configured = settings.model_copy(update={"fail_on_serious": fail_on_serious})
        result = ComplianceChecker(configured).check(make_audit(audit_settings=configured, **counts))

        expected = result.checks["criticalIssues"].passed and (
            not fail_on_serious or result.checks["seriousIssues"].passed
        )
        assert result.passed == expected
        if result.report.all_checks_passed:
            assert result.passed

    def test_report_order_and_messages(self, settings, make_audit):
        result = ComplianceChecker(settings).check(make_audit(critical=1, serious=2))

        assert [check.metric for check in result.report.details] == [
            "Critical issues",
            "Serious issues",
            "Moderate issues",
            "WCAG 2.1 Level AA compliance",
        ]
        assert [result.checks[name] for name in CHECK_ORDER] == list(result.report.details)
        assert result.report.summary[0] == "✗ Critical issues exceed threshold (1/0)"
        assert result.report.summary[1] == "✓ Serious issues within threshold (2/5)"

    def test_threshold_message(self):
        assert threshold_message("Moderate issues", 3, 15, True) == "✓ Moderate issues within threshold (3/15)"
        assert threshold_message("Moderate issues", 16, 15, False) == "✗ Moderate issues exceed threshold (16/15)"

    def test_to_dict(self, settings, make_audit):
        data = ComplianceChecker(settings).check(make_audit(minor=1)).to_dict()
        assert data["passed"] is True
        assert set(data["checks"]) == set(CHECK_ORDER)
        assert data["report"]["allChecksPassed"] is True
        assert data["complianceScore"] == 95


class TestNotifyCI:
    """Webhook notification from the checker."""

    @pytest.mark.asyncio
    async def test_no_webhook_configured(self, settings, make_audit):
        checker = ComplianceChecker(settings)
        audit = make_audit()
        assert await checker.notify_ci(checker.check(audit), audit) is False

    @pytest.mark.asyncio
    async def test_sends_message(self, settings, make_audit):
        checker = ComplianceChecker(settings)
        audit = make_audit(critical=1)
        notifier = AsyncMock()

        assert await checker.notify_ci(checker.check(audit), audit, notifier=notifier) is True

        notifier.send.assert_awaited_once()
        message = notifier.send.await_args.args[0]
        assert message["attachments"][0]["text"] == "Compliance check failed - Deployment blocked"

    @pytest.mark.asyncio
    async def test_failure_is_not_fatal(self, settings, make_audit):
        checker = ComplianceChecker(settings)
        audit = make_audit()
        notifier = AsyncMock()
        notifier.send.side_effect = NotificationError("Webhook returned HTTP 500")

        assert await checker.notify_ci(checker.check(audit), audit, notifier=notifier) is False
