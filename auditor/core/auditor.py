"""
Accessibility Auditor
Scans a page through a scan adapter and turns the findings into an AuditResult
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .classifier import classify
from .model import AuditResult, Summary
from .scanner import AxeScanner, ScanAdapter, ScanOptions
from .scorer import score


class AccessibilityAuditor:
    """Runs scan -> classify -> score for a single URL."""

    def __init__(self, settings, scanner: Optional[ScanAdapter] = None):
        self.settings = settings
        self.scanner = scanner or AxeScanner(settings.axe_script_url)
        self.logger = logging.getLogger(__name__)
        self.results: Optional[AuditResult] = None

    async def audit(self, url: str) -> AuditResult:
        """Audit `url`. ScanError propagates; no partial result is produced."""
        self.logger.info(f"Starting accessibility audit for: {url}")

        try:
            scan_output = await self.scanner.scan(url, ScanOptions.from_settings(self.settings))
        except Exception:
            self.logger.error(f"Audit failed for {url}", exc_info=True)
            raise

        issues = classify(scan_output.findings)
        scored = score(issues, self.settings)

        self.results = AuditResult(
            url=url,
            page_title=scan_output.page_title,
            timestamp=datetime.now(timezone.utc).isoformat(),
            wcag_level=self.settings.wcag_level,
            wcag_version=self.settings.wcag_version,
            issues=issues,
            summary=Summary.from_issue_set(issues),
            status=scored.status,
            compliance=scored.compliance,
        )

        self.logger.info(
            f"Audit completed for: {url} - {self.results.summary.total} issues, "
            f"score {self.results.compliance}%, status {self.results.status}"
        )
        return self.results

    def is_passed(self) -> bool:
        return self.results is not None and self.results.passed

    def get_summary(self) -> Optional[Summary]:
        return self.results.summary if self.results else None
