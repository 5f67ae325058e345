"""
Logger Utility for the Accessibility Auditor
Provides consistent logging configuration
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def setup_logger(verbosity: int = 1,
                 log_file: Optional[str] = None,
                 logger_name: str = "auditor",
                 level: Optional[str] = None) -> logging.Logger:
    """Set up logger with rich console output and optional file output.

    verbosity: 0 = warnings only, 1 = standard, 2 = debug.
    `level` (e.g. LOG_LEVEL from settings) overrides the verbosity-derived
    console level when given.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    if verbosity >= 2:
        console_level = logging.DEBUG
    elif verbosity == 1:
        console_level = logging.getLevelName((level or "INFO").upper())
        if not isinstance(console_level, int):
            console_level = logging.INFO
    else:
        console_level = logging.WARNING

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=(verbosity >= 2),
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

        logger.debug(f"Detailed logs saved to: {log_path}")

    # Suppress overly verbose third-party loggers unless in debug
    noisy_loggers = [
        "httpx", "httpcore", "asyncio", "uvicorn.access", "playwright",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING if verbosity < 2 else logging.INFO)

    return logger
