"""Allow ``python -m auditor``."""

from .cli import app

app()
