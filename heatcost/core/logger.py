"""
Global Logging Configuration with Optional Stage Context Support

This module configures consistent logging for the pipeline, including:
- Console output (INFO+)
- Rotating file output (DEBUG+)
- Per-stage contextual logging using `contextvars`

Responsibilities:
-----------------
- Configures unified logging with timestamps, levels and the name of the module
- Optionally includes `[STAGE:name]` tags in logs while a pipeline stage runs
- Ensures logs remain structured even when no stage is set

Usage:
------
1. Call `setup_logging()` in your entry point.

    from heatcost.core.logger import setup_logging
    setup_logging()

2. Wrap a pipeline stage with `stage_context(...)` to enable context:

    from heatcost.core.logger import stage_context
    with stage_context("thermal_join"):
        ...

This will prefix all log messages with the current stage during processing.

Example:
    2026-01-24 11:00:10 [INFO] [heatcost.processing.thermal_exposure] [STAGE:thermal_join] Joined 412 segments
"""

import logging
import logging.handlers
import contextvars
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from heatcost.core.config import LOG_FILE

_log_stage = contextvars.ContextVar("log_stage", default="-")


def set_stage_context(stage: str) -> contextvars.Token:
    """
    Sets the logging context for the current pipeline stage.

    Args:
        stage (str): Short stage identifier, e.g. "travel_time".

    Returns:
        contextvars.Token: Token that restores the previous stage when reset.
    """
    return _log_stage.set(stage)

def get_stage_context() -> str:
    """
    Retrieves the currently set stage identifier for logging.

    Returns:
        str: The currently active stage or "-" if not set.
    """
    return _log_stage.get()

@contextmanager
def stage_context(stage: str) -> Iterator[None]:
    """
    Context manager that tags all log records emitted inside it with `stage`.
    """
    token = set_stage_context(stage)
    try:
        yield
    finally:
        _log_stage.reset(token)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects the current stage context into each log record.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        stage = get_stage_context()
        record.stage = f"[STAGE:{stage}]" if stage != "-" else ""
        return True

class SafeFormatter(logging.Formatter):
    """
    Custom formatter that avoids crashing on missing fields.

    Fallbacks are provided for any optional log record attributes.
    """
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "stage"):
            record.stage = ""
        if not hasattr(record, "name"):
            record.name = "-"
        return super().format(record)


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file: Optional[Path] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> None:
    """
    Configures application-wide logging with console and rotating file output.

    Both handlers will include `[STAGE:name]` while a `stage_context(...)` is active.

    Args:
        console_level (int): Logging level for console (default: INFO).
        file_level (int): Logging level for file output (default: DEBUG).
        log_file (Path, optional): Log file location, defaults to `LOG_FILE`.
        max_bytes (int): Max size in bytes before file rotation.
        backup_count (int): Number of backup files to keep.
    """
    log_file = Path(log_file) if log_file else LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = SafeFormatter(
        fmt="%(asctime)s [%(levelname)s] [%(name)s] %(stage)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ContextFilter())

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, mode="w", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers = [console_handler, file_handler]
