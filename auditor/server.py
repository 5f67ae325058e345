"""
HTTP service for the Accessibility Auditor

Exposes the audit pipeline, the in-memory audit history and the generated
report files. Audit runs are serialized: only one pipeline executes at a time.
"""

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from .config import Settings, get_settings, validate_config
from .core.errors import (
    AuditorError,
    InvalidReportPathError,
    RenderError,
    ReportNotFoundError,
    ScanError,
)
from .core.history import AuditHistory, AuditRecord
from .core.pipeline import run_pipeline
from .core.scanner import ScanAdapter
from .utils.report import ReportGenerator


logger = logging.getLogger(__name__)

SIGNALS_NOTE = (
    "audit.status is the scorer's advisory verdict; compliance.passed is the "
    "threshold checker's deployment gate. They are computed independently and "
    "can differ, e.g. the WCAG compliance check is zero-tolerance for critical "
    "issues regardless of maxCriticalIssues."
)


class AuditRequest(BaseModel):
    url: Optional[str] = None


def _error(status_code: int, message: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "type": type(exc).__name__},
    )


def create_app(settings: Optional[Settings] = None,
               scanner: Optional[ScanAdapter] = None) -> FastAPI:
    settings = settings or get_settings()
    validate_config(settings, require_url=False)

    app = FastAPI(
        title="Accessibility Compliance Auditor",
        description="WCAG accessibility audits with compliance gating",
    )
    app.state.settings = settings
    app.state.scanner = scanner
    app.state.history = AuditHistory(capacity=settings.history_capacity)
    # Binds to the running loop on first use (Python 3.10+)
    app.state.audit_lock = asyncio.Lock()
    reports = ReportGenerator(settings)

    @app.exception_handler(ScanError)
    async def scan_error_handler(request: Request, exc: ScanError):
        logger.error(f"Audit API scan error: {exc}")
        return _error(502, str(exc), exc)

    @app.exception_handler(InvalidReportPathError)
    async def invalid_path_handler(request: Request, exc: InvalidReportPathError):
        logger.warning(f"Rejected report path: {exc}")
        return _error(400, "Invalid report name", exc)

    @app.exception_handler(ReportNotFoundError)
    async def not_found_handler(request: Request, exc: ReportNotFoundError):
        return _error(404, "Report not found", exc)

    @app.exception_handler(AuditorError)
    async def auditor_error_handler(request: Request, exc: AuditorError):
        logger.error(f"Audit API error: {exc}", exc_info=exc)
        return _error(500, str(exc), exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled API error: {exc}", exc_info=exc)
        return _error(500, "Internal server error", exc)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "message": "Auditor API running"}

    @app.get("/api/audit/latest")
    async def latest_audit():
        record = app.state.history.latest()
        if record is None:
            return JSONResponse(status_code=404, content={"error": "No audit results available"})
        return record.to_dict()

    @app.get("/api/audit/history")
    async def audit_history(limit: Optional[int] = Query(default=None, ge=1)):
        limit = limit or settings.history_limit
        return [record.to_dict() for record in app.state.history.recent(limit)]

    @app.get("/api/audit/{audit_id}")
    async def get_audit(audit_id: str):
        record = app.state.history.get(audit_id)
        if record is None:
            return JSONResponse(status_code=404, content={"error": "Audit not found"})
        return record.to_dict()

    @app.post("/api/audit/run")
    async def run_audit(body: AuditRequest):
        if not body.url:
            return JSONResponse(status_code=400, content={"error": "URL is required"})

        logger.info(f"API request to audit: {body.url}")

        async with app.state.audit_lock:
            outcome = await run_pipeline(settings, body.url, scanner=app.state.scanner)
            record = AuditRecord.from_outcome(outcome)
            app.state.history.append(record)

        return {
            "success": True,
            "audit": record.to_dict(),
            "compliance": outcome.compliance.to_dict(),
            "auditDetails": outcome.audit.to_dict(),
            "signals": {
                "auditStatus": outcome.audit.status,
                "compliancePassed": outcome.compliance.passed,
                "note": SIGNALS_NOTE,
            },
        }

    @app.get("/api/config/thresholds")
    async def thresholds():
        return settings.thresholds()

    @app.get("/api/reports")
    async def list_reports():
        try:
            return reports.list_reports()
        except OSError as e:
            raise RenderError(f"Cannot list reports: {e}") from e

    @app.get("/reports/{filename}")
    async def download_report(filename: str):
        path = reports.resolve_report(filename)
        media_type = "application/json" if path.suffix == ".json" else "text/html"
        return FileResponse(path, media_type=media_type, filename=path.name)

    return app


def run_server(host: str = "0.0.0.0", port: int = 3000, settings: Optional[Settings] = None) -> None:
    import uvicorn

    app = create_app(settings)
    logger.info(f"Accessibility Auditor API running on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)
