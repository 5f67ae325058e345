"""
Report Generation for the Accessibility Auditor
Builds the JSON compliance report, the HTML report and console summaries
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Template
from tabulate import tabulate

from .. import __version__
from ..core.errors import (
    AuditorError,
    InvalidReportPathError,
    RenderError,
    ReportNotFoundError,
)
from ..core.model import STATUS_PASSED, AuditResult, ComplianceResult
from ..data.wcag import fix_suggestion_for


REPORT_PREFIX = "compliance-report"
REPORT_FORMATS = ("json", "html")
CERTIFICATION_VALIDITY = timedelta(days=90)
SECTION_508_MAX_SERIOUS = 2
MAX_CRITICAL_RECOMMENDATIONS = 3

CERTIFICATION_TIERS = (
    (95, "Gold"),
    (85, "Silver"),
    (70, "Bronze"),
)
NON_COMPLIANT = "Non-Compliant"

BUCKET_RECOMMENDATIONS = (
    ("critical", "CRITICAL", "IMMEDIATE: Fix all critical issues before deployment",
     "Legal compliance, user access blocked"),
    ("serious", "HIGH", "Fix serious issues within 2 weeks",
     "Significant accessibility barriers for users"),
    ("moderate", "MEDIUM", "Fix moderate issues within 30 days",
     "Minor accessibility challenges for some users"),
)


def certification_level(compliance: int) -> str:
    for minimum, tier in CERTIFICATION_TIERS:
        if compliance >= minimum:
            return tier
    return NON_COMPLIANT


def generate_recommendations(audit: AuditResult) -> List[Dict[str, Any]]:
    """Recommendations per non-empty bucket plus fixes for the first critical issues."""
    recommendations = []

    for bucket, priority, action, impact in BUCKET_RECOMMENDATIONS:
        count = getattr(audit.summary, bucket)
        if count > 0:
            recommendations.append({
                "priority": priority,
                "issue": f"{count} {bucket} accessibility issues found",
                "action": action,
                "impact": impact,
            })

    for issue in audit.issues.critical[:MAX_CRITICAL_RECOMMENDATIONS]:
        recommendations.append({
            "priority": "CRITICAL",
            "issue": issue.message,
            "wcagCriteria": issue.wcag_criteria,
            "action": f"Fix: {fix_suggestion_for(issue.code)}",
            "affectedElement": issue.selector,
        })

    return recommendations


def legal_compliance(audit: AuditResult) -> Dict[str, bool]:
    no_critical = audit.summary.critical == 0
    return {
        "wcag_2_1_level_aa": no_critical,
        "ada_compliant": no_critical,
        "section_508_compliant": no_critical and audit.summary.serious <= SECTION_508_MAX_SERIOUS,
    }


HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Accessibility &amp; Compliance Audit Report</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 40px 20px; border-radius: 8px; margin-bottom: 30px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); }
        header h1 { font-size: 2.5em; margin-bottom: 10px; }
        header p { font-size: 1.1em; opacity: 0.9; }
        .status-badge { display: inline-block; padding: 10px 20px; color: white; border-radius: 4px; font-weight: bold; font-size: 1.2em; margin: 10px 0; }
        .status-badge.passed { background: #2ecc71; }
        .status-badge.failed { background: #e74c3c; }
        .metrics { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .metric-card { background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); border-left: 4px solid #667eea; }
        .metric-card h3 { color: #667eea; margin-bottom: 5px; }
        .metric-card .value { font-size: 2em; font-weight: bold; color: #333; }
        .metric-card.critical { border-left-color: #e74c3c; }
        .metric-card.critical .value { color: #e74c3c; }
        .metric-card.serious { border-left-color: #f39c12; }
        .metric-card.serious .value { color: #f39c12; }
        .section { background: white; padding: 20px; margin-bottom: 20px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .section h2 { color: #667eea; margin-bottom: 15px; border-bottom: 2px solid #667eea; padding-bottom: 10px; }
        .issue { padding: 15px; margin-bottom: 10px; border-left: 4px solid #ccc; border-radius: 4px; }
        .issue.critical { border-left-color: #e74c3c; background: #ffebee; }
        .issue.serious, .issue.high { border-left-color: #f39c12; background: #fff3e0; }
        .issue.moderate, .issue.medium { border-left-color: #3498db; background: #e3f2fd; }
        .issue.minor { border-left-color: #2ecc71; background: #e8f5e9; }
        .issue-code { font-family: monospace; font-weight: bold; color: #667eea; }
        .issue-selector { font-family: monospace; color: #666; font-size: 0.9em; }
        .check.passed { color: #2e7d32; }
        .check.failed { color: #c62828; }
        .compliance-badge { display: inline-block; padding: 20px; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; border-radius: 8px; text-align: center; margin: 10px 0 30px; }
        .compliance-badge .score { font-size: 3em; font-weight: bold; }
        .compliance-badge .label { opacity: 0.9; }
        footer { text-align: center; margin-top: 40px; padding-top: 20px; border-top: 1px solid #eee; color: #666; }
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>Accessibility &amp; Compliance Audit</h1>
            <p>WCAG {{ audit.wcag_version }} Level {{ audit.wcag_level }} Compliance Report</p>
            <p>URL: {{ audit.url }}</p>
            <p>Generated: {{ generated_at }}</p>
            <div id="status" class="status-badge {{ 'passed' if passed else 'failed' }}">{{ '✓ PASSED' if passed else '✗ FAILED' }}</div>
        </header>

        <div id="score" class="compliance-badge">
            <div class="score">{{ audit.compliance }}%</div>
            <div class="label">Compliance Score &middot; {{ certification }}</div>
        </div>

        <div class="metrics">
            <div class="metric-card total">
                <h3>Total Issues</h3>
                <div class="value">{{ audit.summary.total }}</div>
            </div>
            {% for bucket in buckets %}
            <div class="metric-card {{ bucket }}">
                <h3>{{ bucket | capitalize }}</h3>
                <div class="value">{{ audit.summary[bucket] }}</div>
            </div>
            {% endfor %}
        </div>

        {% if compliance %}
        <div class="section" id="compliance-checks">
            <h2>Compliance Checks</h2>
            <ul>
            {% for message in compliance.report.summary %}
                <li class="check {{ 'passed' if message.startswith('✓') else 'failed' }}">{{ message }}</li>
            {% endfor %}
            </ul>
        </div>
        {% endif %}

        {% for bucket, issues in audit.issues.buckets() if issues %}
        <div class="section issues" id="issues-{{ bucket }}">
            <h2>{{ bucket | upper }} Issues ({{ issues | length }})</h2>
            {% for issue in issues %}
            <div class="issue {{ bucket }}">
                <div><span class="issue-code">{{ issue.code }}</span></div>
                <div><strong>{{ issue.message }}</strong></div>
                <div><strong>WCAG:</strong> {{ issue.wcag_criteria }}</div>
                <div><span class="issue-selector">Selector: {{ issue.selector or 'N/A' }}</span></div>
            </div>
            {% endfor %}
        </div>
        {% endfor %}

        <div class="section" id="recommendations">
            <h2>Recommendations</h2>
            {% for rec in recommendations %}
            <div class="issue {{ rec.priority | lower }}">
                <div><strong>{{ rec.priority }}:</strong> {{ rec.issue }}</div>
                <div><strong>Action:</strong> {{ rec.action }}</div>
                {% if rec.wcagCriteria %}<div><strong>WCAG:</strong> {{ rec.wcagCriteria }}</div>{% endif %}
                {% if rec.affectedElement %}<div><span class="issue-selector">Element: {{ rec.affectedElement }}</span></div>{% endif %}
            </div>
            {% else %}
            <p>No accessibility issues found.</p>
            {% endfor %}
        </div>

        <footer>
            <p>This report was generated by {{ generator }}</p>
            <p>For compliance support, contact your accessibility team</p>
        </footer>
    </div>
</body>
</html>
"""


@dataclass(frozen=True)
class RenderedReport:
    json_path: str
    html_path: str
    report: Dict[str, Any]


class ReportGenerator:
    """Generate compliance reports from audit results."""

    def __init__(self, settings, output_dir: Optional[str] = None):
        self.settings = settings
        self.output_dir = Path(output_dir or settings.report_output_dir)
        self.logger = logging.getLogger(__name__)
        self._template = Template(HTML_TEMPLATE, autoescape=True)

    @property
    def generator_name(self) -> str:
        return f"Accessibility Compliance Auditor v{__version__}"

    def ensure_output_dir(self) -> Path:
        try:
            if not self.output_dir.exists():
                self.output_dir.mkdir(parents=True, exist_ok=True)
                self.logger.info(f"Created report output directory: {self.output_dir}")
        except OSError as e:
            raise RenderError(f"Cannot create report directory {self.output_dir}: {e}") from e
        return self.output_dir

    def report_filename(self, generated_at: datetime, fmt: str) -> str:
        # One report per calendar day; later runs overwrite earlier ones
        return f"{REPORT_PREFIX}-{generated_at.date().isoformat()}.{fmt}"

    def build_report(self,
                     audit: AuditResult,
                     compliance: Optional[ComplianceResult] = None,
                     generated_at: Optional[datetime] = None) -> Dict[str, Any]:
        """Build the JSON compliance report structure."""
        generated_at = generated_at or datetime.now(timezone.utc)

        report = {
            "metadata": {
                "title": "Accessibility & Compliance Audit Report",
                "generatedAt": generated_at.isoformat(),
                "generatedBy": self.generator_name,
                "organization": "Banking Institution",
                "auditType": f"WCAG {audit.wcag_version} Compliance",
            },
            "configuration": {
                "wcagVersion": audit.wcag_version,
                "wcagLevel": audit.wcag_level,
                "maxCriticalIssues": self.settings.max_critical_issues,
                "maxSeriousIssues": self.settings.max_serious_issues,
                "maxModerateIssues": self.settings.max_moderate_issues,
                "failOnSerious": self.settings.fail_on_serious,
            },
            "auditResults": {
                "url": audit.url,
                "pageTitle": audit.page_title,
                "timestamp": audit.timestamp,
                "status": audit.status,
                "complianceScore": audit.compliance,
            },
            "summary": {
                "total_issues": audit.summary.total,
                "critical": audit.summary.critical,
                "serious": audit.summary.serious,
                "moderate": audit.summary.moderate,
                "minor": audit.summary.minor,
            },
            "issues": audit.issues.to_dict(),
            "recommendations": generate_recommendations(audit),
            "legal_compliance": legal_compliance(audit),
            "certification": {
                "passed": audit.status == STATUS_PASSED,
                "certificationLevel": certification_level(audit.compliance),
                "validUntil": (generated_at + CERTIFICATION_VALIDITY).isoformat(),
            },
        }

        if compliance is not None:
            report["compliance"] = compliance.to_dict()

        return report

    def render_html(self,
                    audit: AuditResult,
                    compliance: Optional[ComplianceResult] = None,
                    generated_at: Optional[datetime] = None) -> str:
        """Render the self-contained HTML report."""
        generated_at = generated_at or datetime.now(timezone.utc)
        return self._template.render(
            audit=audit,
            compliance=compliance,
            passed=audit.status == STATUS_PASSED,
            certification=certification_level(audit.compliance),
            buckets=("critical", "serious", "moderate", "minor"),
            recommendations=generate_recommendations(audit),
            generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
            generator=self.generator_name,
        )

    def render(self,
               audit: AuditResult,
               compliance: Optional[ComplianceResult] = None,
               generated_at: Optional[datetime] = None) -> RenderedReport:
        """Write the JSON and HTML reports. Raises RenderError on I/O failure."""
        generated_at = generated_at or datetime.now(timezone.utc)
        output_dir = self.ensure_output_dir()

        report = self.build_report(audit, compliance, generated_at)
        json_path = output_dir / self.report_filename(generated_at, "json")
        html_path = output_dir / self.report_filename(generated_at, "html")

        try:
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Report generated: {json_path}")

            with open(html_path, "w", encoding="utf-8") as f:
                f.write(self.render_html(audit, compliance, generated_at))
            self.logger.info(f"HTML Report generated: {html_path}")
        except OSError as e:
            self.logger.error(f"Failed to generate report: {e}")
            raise RenderError(f"Failed to write report to {output_dir}: {e}") from e

        return RenderedReport(json_path=str(json_path), html_path=str(html_path), report=report)

    def list_reports(self) -> List[Dict[str, Any]]:
        """Generated report files, newest first."""
        if not self.output_dir.exists():
            return []

        reports = []
        for path in self.output_dir.glob(f"{REPORT_PREFIX}-*"):
            fmt = path.suffix.lstrip(".")
            if not path.is_file() or fmt not in REPORT_FORMATS:
                continue
            stat = path.stat()
            reports.append({
                "name": path.name,
                "format": fmt,
                "path": f"/reports/{path.name}",
                "size": stat.st_size,
                "created": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
            })

        reports.sort(key=lambda r: (r["created"], r["name"]), reverse=True)
        return reports

    def latest_report(self) -> Tuple[Path, Dict[str, Any]]:
        """Load the most recent JSON compliance report."""
        if not self.output_dir.exists():
            raise ReportNotFoundError("No reports directory found. Run audit first.")

        files = sorted(self.output_dir.glob(f"{REPORT_PREFIX}-*.json"), reverse=True)
        if not files:
            raise ReportNotFoundError("No compliance reports found. Run audit first.")

        latest = files[0]
        try:
            with open(latest, "r", encoding="utf-8") as f:
                return latest, json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise AuditorError(f"Cannot read report {latest.name}: {e}") from e

    def resolve_report(self, filename: str) -> Path:
        """Resolve a report name inside the output directory.

        Names that escape the directory raise InvalidReportPathError.
        """
        base = self.output_dir.resolve()
        candidate = (base / filename).resolve()

        if candidate.parent != base:
            raise InvalidReportPathError(f"Invalid report name: {filename}")
        if not candidate.is_file():
            raise ReportNotFoundError(f"Report not found: {filename}")

        return candidate

    def console_summary(self,
                        audit: AuditResult,
                        compliance: Optional[ComplianceResult] = None) -> str:
        """Console-friendly table of issue counts against thresholds."""
        thresholds = {
            "critical": self.settings.max_critical_issues,
            "serious": self.settings.max_serious_issues,
            "moderate": self.settings.max_moderate_issues,
        }
        rows = []
        for bucket in ("critical", "serious", "moderate", "minor"):
            rows.append([bucket.capitalize(), getattr(audit.summary, bucket), thresholds.get(bucket, "-")])
        rows.append(["Total", audit.summary.total, "-"])

        table = tabulate(rows, headers=["Severity", "Count", "Max"], tablefmt="grid")

        lines = [
            f"URL: {audit.url}",
            f"Status: {audit.status}",
            f"Compliance Score: {audit.compliance}% ({certification_level(audit.compliance)})",
            "",
            table,
        ]
        if compliance is not None:
            lines.append("")
            lines.extend(f"  {message}" for message in compliance.report.summary)
        return "\n".join(lines)
