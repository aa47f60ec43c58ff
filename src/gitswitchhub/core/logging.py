"""Structlog configuration.

Everything is rendered to stderr: stdout of the credential helper is read
verbatim by git.
"""

import logging
import sys
from typing import Any

import structlog


_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _level_number(level: str) -> int:
    return _LEVELS.get(level.upper(), logging.INFO)


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    """Print to whatever ``sys.stderr`` is when the logger is created."""
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_logs: Render JSON lines instead of the console renderer

    """
    level_no = _level_number(level)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    # Third-party libraries (httpx, sqlalchemy) log through stdlib logging. With no
    # root handler their records reach logging.lastResort, which writes to the
    # current sys.stderr.
    logging.getLogger().setLevel(max(level_no, logging.WARNING))
