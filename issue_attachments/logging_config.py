"""
Centralized logging configuration.

Provides structured JSON logging for CI log collectors and
human-readable output for local runs.  Call ``setup_logging``
once, early, from the entry point.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(
    level: str = "INFO",
    *,
    json_format: bool = False,
    issue_number: str = "-",
) -> None:
    """
    Configure the root logger for the application.

    Every record carries an ``issue`` field so that log lines from
    concurrent workflow runs can be told apart.

    Args:
        level: Logging level name (e.g. ``"INFO"``, ``"DEBUG"``).
        json_format: If ``True``, emit structured JSON lines.
        issue_number: Value injected as ``issue`` into records
            that do not set it themselves.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        fmt = (
            '{"time":"%(asctime)s",'
            '"level":"%(levelname)s",'
            '"logger":"%(name)s",'
            '"issue":"%(issue)s",'
            '"message":"%(message)s"}'
        )
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(name)s | " "%(message)s"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(_IssueContextFilter(issue_number))

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid duplicate handlers on repeated calls
    root.handlers.clear()
    root.addHandler(handler)

    _silence_noisy_loggers(log_level)


class _IssueContextFilter(logging.Filter):
    """Inject ``issue`` into every log record."""

    def __init__(self, issue_number: str) -> None:
        super().__init__()
        self.issue_number = issue_number

    def filter(self, record: logging.LogRecord) -> bool:
        """Add ``issue`` attribute to *record*.

        Args:
            record: The log record to augment.

        Returns:
            Always ``True`` (never suppress records).
        """
        if not hasattr(record, "issue"):
            record.issue = self.issue_number  # type: ignore[attr-defined]
        return True


def _silence_noisy_loggers(app_level: int) -> None:
    """
    Reduce verbosity of third-party libraries.

    Args:
        app_level: The application's configured log level.
    """
    for name in ("httpcore", "httpx"):
        logging.getLogger(name).setLevel(
            max(app_level, logging.WARNING),
        )
