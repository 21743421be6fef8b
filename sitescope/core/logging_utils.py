"""Utilities for configuring SiteScope logging consistently."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Accepted aliases for CLI/config inputs
LEVEL_ALIASES = {
    "CRITIC": "CRITICAL",
    "CRITICAL": "CRITICAL",
    "ERROR": "ERROR",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "INFO": "INFO",
    "DEBUG": "DEBUG",
}

# Loggers of the analysis pipeline, kept aligned with the root level
PIPELINE_LOGGERS = (
    "sitescope.core.scanner",
    "sitescope.core.walker",
    "sitescope.core.dependencies",
    "sitescope.core.components",
    "sitescope.core.language.session",
    "sitescope.core.analyzer",
    "sitescope.config.config",
)

LOG_RESTART_SEPARATOR = """

================================================================================
=== SITESCOPE RUN - {timestamp} ===
================================================================================

"""


def normalize_log_level(level_name: str | None) -> str:
    """Return a normalized logging level name (defaults to INFO)."""
    if not level_name:
        return "INFO"
    return LEVEL_ALIASES.get(level_name.strip().upper(), "INFO")


def prepare_log_file(log_file: str | Path, reset_on_start: bool = True) -> None:
    """Prepare a log file before attaching a handler to it.

    If ``reset_on_start`` is True the previous file is deleted, otherwise a
    timestamped separator is appended so consecutive runs stay readable.
    """
    if not log_file:
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if not log_path.exists():
        return

    try:
        if reset_on_start:
            log_path.unlink()
        else:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(LOG_RESTART_SEPARATOR.format(timestamp=timestamp))
    except OSError as exc:
        # The file handler opened afterwards still works in append mode
        logging.getLogger(__name__).debug("Could not prepare log file %s: %s", log_path, exc)


def configure_logging(
    level_name: str | None,
    extra_loggers: Iterable[str] | None = None,
    log_file: Optional[str | Path] = None,
    reset_on_start: bool = True,
) -> str:
    """Configure root and pipeline loggers to the requested level.

    Optionally attach a file handler when ``log_file`` is provided.

    Args:
        level_name: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        extra_loggers: Additional logger names to configure.
        log_file: Path to log file (optional).
        reset_on_start: If True, clear log file. If False, add a separator.

    Returns:
        The normalized level name effectively applied.
    """
    normalized = normalize_log_level(level_name)
    numeric_level = getattr(logging, normalized, logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)

    for name in PIPELINE_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)

    for name in extra_loggers or []:
        logging.getLogger(name).setLevel(numeric_level)

    if log_file:
        log_path = Path(log_file)
        already_configured = any(
            isinstance(handler, logging.FileHandler)
            and getattr(handler, "baseFilename", None) == str(log_path.resolve())
            for handler in root_logger.handlers
        )
        if not already_configured:
            try:
                prepare_log_file(log_path, reset_on_start)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
            except OSError as exc:
                logging.getLogger(__name__).warning("Failed to attach file handler %s: %s", log_file, exc)
            else:
                file_handler.setLevel(numeric_level)
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
                root_logger.addHandler(file_handler)

    return normalized
