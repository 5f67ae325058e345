"""
Accessibility Compliance Auditor
WCAG Accessibility & Compliance Scanner

Audits a web page for accessibility violations, classifies the findings by
severity, scores them, gates deployments on configurable thresholds and
produces JSON/HTML compliance reports.
"""

__version__ = "1.0.0"
__author__ = "Accessibility Compliance Team"
__description__ = "WCAG accessibility and compliance auditor"

import logging

logger = logging.getLogger(__name__)
