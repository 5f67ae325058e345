"""
Tests for the HTTP service
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from auditor.core.errors import ScanError
from auditor.core.model import ScanOutput
from auditor.core.scanner import ScanAdapter, StaticScanner
from auditor.data.samples import SAMPLE_FINDINGS, SAMPLE_TITLE
from auditor.server import SIGNALS_NOTE, create_app


class FailingScanner(ScanAdapter):
    async def scan(self, url, options):
        raise ScanError(url, "net::ERR_NAME_NOT_RESOLVED")


class SlowScanner(ScanAdapter):
    """Records how many scans overlap."""

    def __init__(self, delay=0.05):
        self.delay = delay
        self.active = 0
        self.max_active = 0

    async def scan(self, url, options):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        return ScanOutput(findings=[], page_title=url)


@pytest.fixture
def client(settings):
    app = create_app(settings, scanner=StaticScanner(SAMPLE_FINDINGS, page_title=SAMPLE_TITLE))
    with TestClient(app) as client:
        yield client


def run_audit(client, url="https://bank.example.com"):
    response = client.post("/api/audit/run", json={"url": url})
    assert response.status_code == 200
    return response.json()


class TestAuditEndpoints:

    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "ok"

    def test_run_audit(self, client):
        data = run_audit(client)

        assert data["success"] is True
        assert data["audit"]["url"] == "https://bank.example.com"
        assert data["audit"]["complianceScore"] == 78
        assert data["auditDetails"]["summary"]["serious"] == 2
        assert data["compliance"]["passed"] is True
        assert data["signals"] == {
            "auditStatus": "PASSED",
            "compliancePassed": True,
            "note": SIGNALS_NOTE,
        }

    def test_missing_url(self, client):
        response = client.post("/api/audit/run", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    def test_scan_error(self, settings):
        with TestClient(create_app(settings, scanner=FailingScanner())) as client:
            response = client.post("/api/audit/run", json={"url": "https://nowhere.invalid"})

        assert response.status_code == 502
        assert response.json()["type"] == "ScanError"
        assert "ERR_NAME_NOT_RESOLVED" in response.json()["error"]

    def test_latest_empty(self, client):
        response = client.get("/api/audit/latest")
        assert response.status_code == 404
        assert response.json() == {"error": "No audit results available"}

    def test_latest_and_lookup(self, client):
        first = run_audit(client, "https://a.example.com")
        second = run_audit(client, "https://b.example.com")

        assert client.get("/api/audit/latest").json()["id"] == second["audit"]["id"]
        assert client.get(f"/api/audit/{first['audit']['id']}").json()["url"] == "https://a.example.com"

    def test_unknown_audit(self, client):
        response = client.get("/api/audit/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Audit not found"}

    def test_history(self, client):
        for n in range(3):
            run_audit(client, f"https://example.com/{n}")

        history = client.get("/api/audit/history").json()
        assert [item["url"] for item in history] == [f"https://example.com/{n}" for n in range(3)]

        limited = client.get("/api/audit/history", params={"limit": 2}).json()
        assert [item["url"] for item in limited] == ["https://example.com/1", "https://example.com/2"]

    def test_history_bounded(self, settings):
        small = settings.model_copy(update={"history_capacity": 2})
        app = create_app(small, scanner=StaticScanner([]))
        with TestClient(app) as client:
            for n in range(4):
                run_audit(client, f"https://example.com/{n}")
            assert len(client.get("/api/audit/history").json()) == 2

    def test_thresholds(self, client):
        assert client.get("/api/config/thresholds").json()["maxSeriousIssues"] == 5


class TestReportEndpoints:

    def test_list_reports(self, client):
        assert client.get("/api/reports").json() == []
        run_audit(client)

        reports = client.get("/api/reports").json()
        assert {r["format"] for r in reports} == {"json", "html"}

    def test_download_report(self, client):
        run_audit(client)
        report = next(r for r in client.get("/api/reports").json() if r["format"] == "json")

        response = client.get(report["path"])
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["auditResults"]["url"] == "https://bank.example.com"

    def test_download_missing(self, client):
        response = client.get("/reports/compliance-report-1999-01-01.json")
        assert response.status_code == 404
        assert response.json()["error"] == "Report not found"

    def test_download_rejects_traversal(self, client):
        run_audit(client)
        response = client.get("/reports/%2E%2E")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid report name"


class TestConcurrentAudits:
    """Overlapping audit requests against one app instance."""

    @pytest.fixture
    def slow_scanner(self):
        return SlowScanner()

    @pytest.fixture
    def app(self, settings, slow_scanner):
        # Built outside any running event loop, as uvicorn does
        return create_app(settings, scanner=slow_scanner)

    @pytest.mark.asyncio
    async def test_runs_are_serialized(self, app, slow_scanner):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            first, second = await asyncio.gather(
                client.post("/api/audit/run", json={"url": "https://a.example.com"}),
                client.post("/api/audit/run", json={"url": "https://b.example.com"}),
            )
            history = (await client.get("/api/audit/history")).json()

        assert first.status_code == 200
        assert second.status_code == 200
        assert slow_scanner.max_active == 1
        assert sorted(item["url"] for item in history) == ["https://a.example.com", "https://b.example.com"]
        assert first.json()["audit"]["id"] != second.json()["audit"]["id"]
