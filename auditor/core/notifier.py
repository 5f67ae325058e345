"""
Webhook notifier for CI/CD chat integrations (Slack, Teams, ...)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from .errors import NotificationError


PASS_COLOR = "#2ecc71"
FAIL_COLOR = "#e74c3c"


def build_message(result, audit, settings, sent_at: Optional[datetime] = None) -> Dict[str, Any]:
    """Build a Slack-style attachment message describing the audit outcome."""
    sent_at = sent_at or datetime.now()
    status_emoji = "✅" if result.passed else "❌"

    return {
        "attachments": [
            {
                "color": PASS_COLOR if result.passed else FAIL_COLOR,
                "title": f"{status_emoji} Accessibility Audit Report",
                "text": (
                    "All compliance checks passed!"
                    if result.passed
                    else "Compliance check failed - Deployment blocked"
                ),
                "fields": [
                    {"title": "URL", "value": audit.url, "short": False},
                    {"title": "Status", "value": audit.status, "short": True},
                    {"title": "Compliance Score", "value": f"{audit.compliance}%", "short": True},
                    {
                        "title": "Critical Issues",
                        "value": f"{audit.summary.critical} (Max: {settings.max_critical_issues})",
                        "short": True,
                    },
                    {
                        "title": "Serious Issues",
                        "value": f"{audit.summary.serious} (Max: {settings.max_serious_issues})",
                        "short": True,
                    },
                    {"title": "Total Issues", "value": str(audit.summary.total), "short": True},
                    {
                        "title": "Checks Summary",
                        "value": "\n".join(result.report.summary),
                        "short": False,
                    },
                ],
                "ts": int(sent_at.timestamp()),
            }
        ]
    }


class WebhookNotifier:
    """Posts JSON messages to a webhook endpoint. One attempt, no retries."""

    def __init__(self,
                 url: str,
                 timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self.logger = logging.getLogger(__name__)

    async def send(self, message: Dict[str, Any]) -> int:
        """POST the message; returns the HTTP status code.

        Raises NotificationError on transport failures and non-2xx responses.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    json=message,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"Webhook returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationError(f"Webhook request failed: {e}") from e

        self.logger.debug(f"Webhook responded with {response.status_code}")
        return response.status_code
