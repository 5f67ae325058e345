"""
Audit pipeline: scan -> classify -> score -> check -> render -> notify.

Stages run strictly in order. Fatal errors (ScanError, RenderError) propagate
to the caller; notification failures are logged and ignored.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..utils.report import RenderedReport, ReportGenerator
from .auditor import AccessibilityAuditor
from .checker import ComplianceChecker
from .model import AuditResult, ComplianceResult
from .scanner import ScanAdapter


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineOutcome:
    audit: AuditResult
    compliance: ComplianceResult
    rendered: Optional[RenderedReport]
    notified: bool = False

    @property
    def passed(self) -> bool:
        """Deployment gate, taken from the threshold checker."""
        return self.compliance.passed


async def run_pipeline(settings,
                       url: str,
                       scanner: Optional[ScanAdapter] = None,
                       output_dir: Optional[str] = None,
                       notify: bool = True) -> PipelineOutcome:
    auditor = AccessibilityAuditor(settings, scanner)
    audit = await auditor.audit(url)

    checker = ComplianceChecker(settings)
    compliance = checker.check(audit)

    rendered = ReportGenerator(settings, output_dir).render(audit, compliance)

    notified = False
    if notify:
        notified = await checker.notify_ci(compliance, audit)

    logger.info(
        f"Pipeline finished for {url}: compliance {'passed' if compliance.passed else 'failed'}"
    )
    return PipelineOutcome(audit=audit, compliance=compliance, rendered=rendered, notified=notified)
