"""
Scan adapters

The accessibility engine itself (axe-core running in headless Chromium) is an
external collaborator. Adapters only drive it and convert its output into
RawFinding objects.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..data.wcag import axe_tags_for
from .errors import ScanError
from .model import RawFinding, ScanOutput


# axe impact -> engine severity, as pa11y's axe runner reports them
AXE_IMPACT_TO_TYPE = {
    "critical": "error",
    "serious": "error",
    "moderate": "warning",
    "minor": "notice",
}
INCOMPLETE_TYPE = "info"

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

AXE_RUN_SCRIPT = """
async ({selectors, tags}) => {
    if (!window.axe || !window.axe.run) {
        return {error: 'axe not loaded'};
    }
    const present = selectors.filter((selector) => {
        try {
            return document.querySelector(selector) !== null;
        } catch (e) {
            return false;
        }
    });
    const context = present.length ? {include: present.map((s) => [s])} : document;
    try {
        const res = await window.axe.run(context, {
            runOnly: {type: 'tag', values: tags},
            resultTypes: ['violations', 'incomplete'],
        });
        return {violations: res.violations, incomplete: res.incomplete};
    } catch (e) {
        return {error: (e && e.message) || String(e)};
    }
}
"""


@dataclass
class ScanOptions:
    standard_level: str = "AA"
    include_selectors: List[str] = field(default_factory=list)
    wait_ms: int = 5000
    timeout_ms: int = 30000

    @classmethod
    def from_settings(cls, settings) -> "ScanOptions":
        return cls(
            standard_level=settings.wcag_level,
            include_selectors=settings.include_selector_list,
            wait_ms=settings.wait_ms,
            timeout_ms=settings.scan_timeout_ms,
        )


class ScanAdapter(ABC):
    """Interface every scanning backend implements."""

    name = "adapter"

    @abstractmethod
    async def scan(self, url: str, options: ScanOptions) -> ScanOutput:
        """Scan `url` and return raw findings. Raises ScanError on failure."""


def _format_target(target: Any) -> str:
    # axe nests selectors for elements inside iframes / shadow roots
    if isinstance(target, (list, tuple)):
        return " >>> ".join(_format_target(part) for part in target)
    return str(target)


def findings_from_axe(results: Dict[str, Any]) -> List[RawFinding]:
    """Flatten axe-core results into one RawFinding per offending node."""
    findings = []

    for violation in results.get("violations") or []:
        engine_type = AXE_IMPACT_TO_TYPE.get(violation.get("impact") or "", "warning")
        findings.extend(_rule_findings(violation, engine_type))

    for needs_review in results.get("incomplete") or []:
        findings.extend(_rule_findings(needs_review, INCOMPLETE_TYPE))

    return findings


def _rule_findings(rule: Dict[str, Any], engine_type: str) -> List[RawFinding]:
    code = rule.get("id", "")
    message = rule.get("help") or rule.get("description") or code
    nodes = rule.get("nodes") or [{}]

    findings = []
    for node in nodes:
        target = node.get("target")
        findings.append(RawFinding(
            code=code,
            type=engine_type,
            message=message,
            selector=_format_target(target) if target else None,
            context=node.get("html"),
            runner="axe",
        ))
    return findings


class AxeScanner(ScanAdapter):
    """Runs axe-core inside headless Chromium via Playwright."""

    name = "axe"

    def __init__(self, axe_script_url: str):
        self.axe_script_url = axe_script_url
        self.logger = logging.getLogger(__name__)

    async def scan(self, url: str, options: ScanOptions) -> ScanOutput:
        self.logger.info(f"Starting accessibility scan for: {url}")
        tags = list(axe_tags_for(options.standard_level))

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    page = await browser.new_page()
                    page.set_default_timeout(options.timeout_ms)
                    await page.goto(url, wait_until="load")
                    if options.wait_ms:
                        await page.wait_for_timeout(options.wait_ms)

                    await self._inject_axe(page)
                    results = await page.evaluate(
                        AXE_RUN_SCRIPT,
                        {"selectors": options.include_selectors, "tags": tags},
                    )
                    page_title = await page.title()
                finally:
                    await browser.close()
        except PlaywrightError as e:
            self.logger.debug(f"Playwright failure while scanning {url}", exc_info=True)
            raise ScanError(url, str(e)) from e

        if not isinstance(results, dict):
            raise ScanError(url, "unexpected axe result")
        if results.get("error"):
            raise ScanError(url, f"axe.run failed: {results['error']}")

        findings = findings_from_axe(results)
        self.logger.info(f"Scan completed for {url}: {len(findings)} findings")
        return ScanOutput(findings=findings, page_title=page_title)

    async def _inject_axe(self, page) -> None:
        if self.axe_script_url.startswith(("http://", "https://")):
            await page.add_script_tag(url=self.axe_script_url)
        else:
            await page.add_script_tag(path=self.axe_script_url)


class StaticScanner(ScanAdapter):
    """Serves pre-recorded findings instead of driving a browser.

    Used for offline audits of exported pa11y/engine results and the demo.
    """

    name = "static"

    def __init__(self,
                 findings: Iterable[Union[RawFinding, Dict[str, Any]]],
                 page_title: str = ""):
        self.findings = [
            f if isinstance(f, RawFinding) else RawFinding.from_dict(f)
            for f in findings
        ]
        self.page_title = page_title
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StaticScanner":
        """Load findings from JSON: a list of issues or a pa11y result object."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ScanError(str(path), f"cannot load findings: {e}") from e

        if isinstance(data, list):
            return cls(data)
        if isinstance(data, dict):
            if "violations" in data or "incomplete" in data:
                return cls(findings_from_axe(data), page_title=data.get("documentTitle", ""))
            return cls(data.get("issues", []), page_title=data.get("documentTitle", ""))
        raise ScanError(str(path), "findings file must contain a list or an object")

    async def scan(self, url: str, options: Optional[ScanOptions] = None) -> ScanOutput:
        self.logger.info(f"Using {len(self.findings)} recorded findings for: {url}")
        return ScanOutput(findings=list(self.findings), page_title=self.page_title)
