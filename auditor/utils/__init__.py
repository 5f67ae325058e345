"""
Auditor Utility Modules
Logging and report generation utilities
"""

from .logger import setup_logger
from .report import ReportGenerator

__all__ = [
    "setup_logger",
    "ReportGenerator",
]
