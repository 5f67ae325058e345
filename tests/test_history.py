"""
Tests for the in-memory audit history
"""

import pytest

from auditor.core.history import AuditHistory, AuditRecord


def record(n):
    return AuditRecord(
        id=f"id-{n}",
        timestamp=f"2024-01-{n + 1:02d}T00:00:00+00:00",
        url=f"https://example.com/{n}",
        status="PASSED",
        compliance_score=90,
        summary={"total": 0, "critical": 0, "serious": 0, "moderate": 0, "minor": 0},
        compliance_passed=True,
    )


class TestAuditHistory:

    def test_empty(self):
        history = AuditHistory(capacity=3)
        assert len(history) == 0
        assert history.latest() is None
        assert history.recent(5) == []

    def test_capacity_bound(self):
        history = AuditHistory(capacity=3)
        for n in range(5):
            history.append(record(n))

        assert len(history) == 3
        assert [r.id for r in history.recent(10)] == ["id-2", "id-3", "id-4"]
        assert history.latest().id == "id-4"
        assert history.get("id-0") is None

    def test_recent_limit(self):
        history = AuditHistory(capacity=10)
        for n in range(4):
            history.append(record(n))
        assert [r.id for r in history.recent(2)] == ["id-2", "id-3"]
        assert history.recent(0) == []

    def test_get(self):
        history = AuditHistory()
        history.append(record(1))
        assert history.get("id-1").url == "https://example.com/1"

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            AuditHistory(capacity=0)

    def test_to_dict(self):
        data = record(0).to_dict()
        assert data["complianceScore"] == 90
        assert data["compliancePassed"] is True
        assert data["reportPath"] is None
