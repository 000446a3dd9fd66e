"""
Workflow output reporting.

The pipeline reports its outcome through an ``OutputSink`` passed
in by the caller instead of writing to ``$GITHUB_OUTPUT``
directly, so tests can record outputs without touching the
environment.

Values are written in the GitHub Actions output-file format:
``key=value`` for single-line values and the heredoc form
``key<<DELIMITER`` … ``DELIMITER`` for multi-line ones.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Protocol, TextIO

from issue_attachments.core.config import Settings

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Anything that can publish a named string output."""

    def emit(self, key: str, value: str) -> None:
        """Publish *value* under *key*."""


def _new_delimiter(value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    while delimiter in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return delimiter


def format_output(key: str, value: str) -> str:
    """Render one output entry, newline-terminated.

    Args:
        key: Output name.  Must be a single line without ``=``.
        value: Output value; may span several lines.

    Raises:
        ValueError: If *key* is not a valid output name.
    """
    if not key or "=" in key or "<<" in key or any(c in key for c in "\r\n"):
        raise ValueError(f"Invalid output name: {key!r}")
    if "\n" in value or "\r" in value:
        delimiter = _new_delimiter(value)
        return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"
    return f"{key}={value}\n"


class GitHubOutputSink:
    """Append outputs to the file named by ``$GITHUB_OUTPUT``."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def emit(self, key: str, value: str) -> None:
        """Append *key* / *value* to the output file."""
        entry = format_output(key, value)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(entry)
        logger.debug("Set output %s", key)


class StdoutOutputSink:
    """Print outputs; used when running outside a workflow."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def emit(self, key: str, value: str) -> None:
        """Write *key* / *value* to the stream (stdout by default)."""
        stream = self.stream or sys.stdout
        stream.write(format_output(key, value))
        stream.flush()


def get_output_sink(settings: Settings) -> OutputSink:
    """Pick the sink matching the current environment."""
    if settings.GITHUB_OUTPUT:
        return GitHubOutputSink(settings.GITHUB_OUTPUT)
    logger.warning("GITHUB_OUTPUT is not set; writing outputs to stdout")
    return StdoutOutputSink()
