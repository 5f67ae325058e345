"""
In-memory audit history for service mode.

A bounded, append-only store created at service start. Writers must be
serialized by the caller (the HTTP service holds a lock around audit runs).
"""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional


@dataclass(frozen=True)
class AuditRecord:
    id: str
    timestamp: str
    url: str
    status: str
    compliance_score: int
    summary: Dict[str, int]
    compliance_passed: bool
    report_path: Optional[str] = None
    html_report_path: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome) -> "AuditRecord":
        audit = outcome.audit
        rendered = outcome.rendered
        return cls(
            id=uuid.uuid4().hex,
            timestamp=audit.timestamp,
            url=audit.url,
            status=audit.status,
            compliance_score=audit.compliance,
            summary=audit.summary.to_dict(),
            compliance_passed=outcome.compliance.passed,
            report_path=rendered.json_path if rendered else None,
            html_report_path=rendered.html_path if rendered else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "url": self.url,
            "status": self.status,
            "complianceScore": self.compliance_score,
            "summary": self.summary,
            "compliancePassed": self.compliance_passed,
            "reportPath": self.report_path,
            "htmlReportPath": self.html_report_path,
        }


class AuditHistory:
    """Capped list of past audit records; the oldest records drop off first."""

    def __init__(self, capacity: int = 100):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._records: Deque[AuditRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def append(self, record: AuditRecord) -> None:
        self._records.append(record)

    def latest(self) -> Optional[AuditRecord]:
        return self._records[-1] if self._records else None

    def recent(self, limit: int) -> List[AuditRecord]:
        """Most recent `limit` records, oldest first."""
        if limit <= 0:
            return []
        return list(self._records)[-limit:]

    def get(self, record_id: str) -> Optional[AuditRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)
