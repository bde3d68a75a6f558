"""Logging initialization helpers."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from regsweep.config import Settings


def setup_logging(settings: Settings) -> None:
    """Route regsweep diagnostics away from the audit report.

    The report (digest lines and totals) is the only thing written to stdout;
    scan progress, skipped links and fatal listing errors go to stderr and,
    when LOG_FILE is set, to a rotating file. boto3/botocore loggers keep
    their own configuration.
    """
    logger = logging.getLogger("regsweep")
    if getattr(logger, "_regsweep_configured", False):
        return

    level_name = str(settings.logging.level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        fmt=str(settings.logging.format),
        datefmt=str(settings.logging.datefmt),
    )

    handlers: list[logging.Handler] = []
    if settings.logging.console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setLevel(level)
        stream.setFormatter(formatter)
        handlers.append(stream)

    if settings.logging.file:
        file_path = Path(str(settings.logging.file))
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            file_path,
            maxBytes=int(settings.logging.max_bytes),
            backupCount=int(settings.logging.backup_count),
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(formatter)
        handlers.append(fh)

    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    setattr(logger, "_regsweep_configured", True)
