"""
Configuration for the auditor.

Settings are read once from the environment (and an optional ``.env`` file)
and stay read-only for the lifetime of the process.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigurationError
from .core.model import WCAG_LEVELS


DEFAULT_AXE_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/axe-core@4.10.2/axe.min.js"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Audit
    audit_url: Optional[str] = None
    wcag_level: str = "AA"
    wcag_version: str = "2.1"

    # API credentials (only validated, never sent anywhere)
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    api_endpoint: Optional[str] = None

    # Compliance thresholds
    max_critical_issues: int = Field(default=0, ge=0)
    max_serious_issues: int = Field(default=5, ge=0)
    max_moderate_issues: int = Field(default=15, ge=0)
    fail_on_serious: bool = False

    # Reports
    report_output_dir: str = "./reports"

    # Logging
    log_level: str = "INFO"
    log_file: str = "./logs/audit.log"

    # CI/CD
    notification_webhook: Optional[str] = None
    notification_timeout: float = 10.0

    # Environment
    environment: str = Field(default="development", validation_alias="APP_ENV")
    strict_mode: bool = False

    # Scanner
    include_selectors: str = Field(
        default=".bank-container,main,.content",
        validation_alias="AUDIT_INCLUDE_SELECTORS",
    )
    wait_ms: int = Field(default=5000, ge=0, validation_alias="AUDIT_WAIT_MS")
    scan_timeout_ms: int = Field(default=30000, gt=0)
    axe_script_url: str = DEFAULT_AXE_SCRIPT_URL

    # Service mode
    history_limit: int = Field(default=20, gt=0)
    history_capacity: int = Field(default=100, gt=0)

    @field_validator("wcag_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = (value or "").strip().upper()
        if level not in WCAG_LEVELS:
            raise ValueError(f"WCAG_LEVEL must be one of {', '.join(WCAG_LEVELS)}")
        return level

    @field_validator("audit_url", "notification_webhook", "api_key")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def include_selector_list(self) -> List[str]:
        return [s.strip() for s in self.include_selectors.split(",") if s.strip()]

    def thresholds(self) -> dict:
        return {
            "wcagLevel": self.wcag_level,
            "maxCriticalIssues": self.max_critical_issues,
            "maxSeriousIssues": self.max_serious_issues,
            "maxModerateIssues": self.max_moderate_issues,
            "failOnSerious": self.fail_on_serious,
        }


def validate_config(settings: Settings, require_url: bool = True) -> bool:
    """Validate settings that the audit cannot run without.

    Raises ConfigurationError listing every problem found.
    """
    errors = []

    if require_url and not settings.audit_url:
        errors.append("AUDIT_URL environment variable is required")

    if settings.strict_mode and not settings.api_key:
        errors.append("API_KEY environment variable is required in strict mode")

    if errors:
        raise ConfigurationError(errors)

    return True


def load_settings(**overrides) -> Settings:
    """Read settings from the environment, reporting bad values as ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(errors) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
