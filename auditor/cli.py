#!/usr/bin/env python3
"""
Accessibility Auditor CLI Interface
Command-line interface for WCAG audits and CI/CD compliance gating
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from tabulate import tabulate

from .config import Settings, load_settings, validate_config
from .core.checker import ComplianceChecker
from .core.errors import AuditorError, ConfigurationError
from .core.model import STATUS_PASSED, AuditResult, ComplianceResult
from .core.pipeline import PipelineOutcome, run_pipeline
from .core.scanner import StaticScanner
from .data.samples import SAMPLE_FINDINGS, SAMPLE_TITLE, SAMPLE_URL
from .utils.logger import setup_logger
from .utils.report import ReportGenerator, certification_level

app = typer.Typer(
    name="a11y-audit",
    help="Accessibility & Compliance Auditor (WCAG)",
    no_args_is_help=True
)

console = Console()

BANNER = "Accessibility & Compliance Auditor"
RULE = "═" * 39


def _load_settings(**overrides) -> Settings:
    settings = load_settings()
    updates = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=updates) if updates else settings


def _error_banner(title: str, error: Exception, verbose: int = 1) -> None:
    console.print(f"\n[bold red]✗ {title}[/bold red]\n")
    console.print(f"[red]Error: {escape(str(error))}[/red]\n")
    if verbose >= 2:
        console.print_exception()


def display_results(audit: AuditResult, compliance: ComplianceResult, settings: Settings) -> None:
    """Display audit results in the console."""
    summary = audit.summary
    status_style = "bold green" if audit.status == STATUS_PASSED else "bold red"

    console.print("\n[bold cyan]AUDIT RESULTS[/bold cyan]\n")
    console.print(f"  Status:           [{status_style}]{audit.status}[/{status_style}]")
    console.print(
        f"  Compliance Score: [bold]{audit.compliance}%[/bold] "
        f"({certification_level(audit.compliance)})"
    )
    console.print(f"  URL:              {escape(audit.url)}\n")

    table = Table(title="Issue Summary", show_header=True, header_style="bold cyan")
    table.add_column("Severity")
    table.add_column("Count", justify="right")
    table.add_column("Max", justify="right")
    table.add_row("[red]Critical[/red]", str(summary.critical), str(settings.max_critical_issues))
    table.add_row("[yellow]Serious[/yellow]", str(summary.serious), str(settings.max_serious_issues))
    table.add_row("[blue]Moderate[/blue]", str(summary.moderate), str(settings.max_moderate_issues))
    table.add_row("[green]Minor[/green]", str(summary.minor), "-")
    table.add_row("[bold]Total[/bold]", str(summary.total), "-")
    console.print(table)

    _display_checks(compliance)


def _display_checks(compliance: ComplianceResult) -> None:
    console.print("\n[bold cyan]COMPLIANCE CHECKS[/bold cyan]\n")
    for check in compliance.report.details:
        style = "green" if check.passed else "red"
        console.print(f"  [{style}]{check.message}[/{style}]")
    console.print()


def _finish(outcome: PipelineOutcome) -> None:
    if outcome.rendered:
        console.print(f"[green]✓ JSON Report: {outcome.rendered.json_path}[/green]")
        console.print(f"[green]✓ HTML Report: {outcome.rendered.html_path}[/green]")
    if outcome.notified:
        console.print("[green]✓ Notification sent[/green]")

    console.print(f"\n[bold cyan]{RULE}[/bold cyan]\n")

    if outcome.passed:
        console.print("[bold green]✓ AUDIT PASSED - Ready for deployment[/bold green]\n")
        return

    console.print("[bold red]✗ AUDIT FAILED - Deployment blocked[/bold red]\n")
    console.print("[yellow]Required Actions:[/yellow]")
    for message in outcome.compliance.report.summary:
        if message.startswith("✗"):
            console.print(f"[red]  {message}[/red]")
    console.print()
    raise typer.Exit(1)


@app.command()
def audit(
    url: Optional[str] = typer.Option(
        None, "--url", "-u",
        help="URL to audit (defaults to AUDIT_URL)"
    ),
    findings: Optional[str] = typer.Option(
        None, "--findings", "-f",
        help="Audit recorded engine findings from a JSON file instead of launching a browser"
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o",
        help="Output directory for reports (defaults to REPORT_OUTPUT_DIR)"
    ),
    no_notify: bool = typer.Option(
        False, "--no-notify",
        help="Skip the CI/CD webhook notification"
    ),
    verbose: int = typer.Option(
        1, "--verbose", "-v",
        help="Verbosity level: 0=minimal, 1=standard, 2=debug"
    )
):
    """Run an accessibility audit and gate on compliance thresholds."""
    try:
        settings = _load_settings(audit_url=url, report_output_dir=output_dir)
        validate_config(settings)
    except ConfigurationError as e:
        _error_banner("CONFIGURATION ERROR", e, verbose)
        raise typer.Exit(1)

    logger = setup_logger(verbose, settings.log_file, level=settings.log_level)
    logger.info("Configuration validated successfully")

    console.print(Panel(
        f"Scanning: {escape(settings.audit_url)}\n"
        f"Standard: WCAG {settings.wcag_version} Level {settings.wcag_level}\n"
        f"Environment: {settings.environment}",
        title=BANNER,
        border_style="cyan",
    ))

    try:
        scanner = StaticScanner.from_file(findings) if findings else None
        console.print("[bold yellow]▶ Running accessibility audit...[/bold yellow]")
        outcome = asyncio.run(run_pipeline(
            settings,
            settings.audit_url,
            scanner=scanner,
            notify=not no_notify,
        ))
    except KeyboardInterrupt:
        console.print("[yellow]Audit interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Audit failed: {e}", exc_info=True)
        _error_banner("AUDIT ERROR", e, verbose)
        raise typer.Exit(1)

    display_results(outcome.audit, outcome.compliance, settings)
    _finish(outcome)


@app.command()
def check(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o",
        help="Directory holding compliance reports (defaults to REPORT_OUTPUT_DIR)"
    )
):
    """Re-check the latest persisted report against the current thresholds."""
    try:
        settings = _load_settings(report_output_dir=output_dir)
        path, report = ReportGenerator(settings).latest_report()
        audit_result = AuditResult.from_report(report)
        result = ComplianceChecker(settings).check(audit_result)
    except AuditorError as e:
        _error_banner("COMPLIANCE CHECK ERROR", e)
        raise typer.Exit(1)

    console.print(f"\n{RULE}")
    console.print("COMPLIANCE CHECK RESULTS")
    console.print(f"{RULE}\n")
    console.print(f"Report: {path.name}")
    console.print(f"Status: {'[green]✅ PASSED[/green]' if result.passed else '[red]❌ FAILED[/red]'}\n")
    console.print(ReportGenerator(settings).console_summary(audit_result, result), markup=False)
    console.print(f"\n{RULE}\n")

    if not result.passed:
        raise typer.Exit(1)


@app.command()
def demo(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o",
        help="Output directory for the demo reports"
    )
):
    """Run the full pipeline offline against built-in sample findings."""
    try:
        settings = _load_settings(report_output_dir=output_dir)
    except ConfigurationError as e:
        _error_banner("CONFIGURATION ERROR", e)
        raise typer.Exit(1)

    console.print(Panel(f"Demo audit of {SAMPLE_URL} (no browser)", title=BANNER, border_style="cyan"))
    scanner = StaticScanner(SAMPLE_FINDINGS, page_title=SAMPLE_TITLE)

    try:
        outcome = asyncio.run(run_pipeline(settings, SAMPLE_URL, scanner=scanner, notify=False))
    except KeyboardInterrupt:
        console.print("[yellow]Demo interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _error_banner("DEMO ERROR", e)
        raise typer.Exit(1)

    display_results(outcome.audit, outcome.compliance, settings)
    console.print(f"[green]✓ JSON Report: {outcome.rendered.json_path}[/green]")
    console.print(f"[green]✓ HTML Report: {outcome.rendered.html_path}[/green]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: int = typer.Option(3000, "--port", "-p", help="Port to listen on"),
    verbose: int = typer.Option(1, "--verbose", "-v", help="Verbosity level")
):
    """Start the HTTP service."""
    from .server import run_server

    try:
        settings = _load_settings()
        setup_logger(verbose, settings.log_file, level=settings.log_level)
        run_server(host=host, port=port, settings=settings)
    except ConfigurationError as e:
        _error_banner("CONFIGURATION ERROR", e)
        raise typer.Exit(1)


@app.command()
def thresholds():
    """Show the active compliance thresholds."""
    try:
        settings = _load_settings()
    except ConfigurationError as e:
        _error_banner("CONFIGURATION ERROR", e)
        raise typer.Exit(1)

    rows = [[key, value] for key, value in settings.thresholds().items()]
    console.print(tabulate(rows, headers=["Setting", "Value"], tablefmt="grid"), markup=False)


@app.command()
def version():
    """Show version information."""
    from . import __version__, __author__
    console.print(f"Accessibility Compliance Auditor v{__version__}")
    console.print(f"By {__author__}")


if __name__ == "__main__":
    app()
