"""
Command-line entry point.

Reads the comment context from the environment, runs the
ingestion pipeline and maps the outcome to a process exit code:

* ``0``: normal completion, including "no files found" and runs
  where some URLs were skipped.
* ``1``: missing configuration, malformed issue number, detected
  path traversal, or any unexpected error.

Usage::

    GITHUB_TOKEN=... ISSUE_NUMBER=42 COMMENT_ID=1 \\
    GITHUB_REPOSITORY=owner/repo COMMENT_BODY="..." \\
        python -m issue_attachments
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from issue_attachments.core.config import Settings, get_settings, get_version
from issue_attachments.core.exceptions import ConfigurationError, IngestionError
from issue_attachments.logging_config import setup_logging
from issue_attachments.schemas import IngestionRequest
from issue_attachments.services.ingestion import ingest_comment_files
from issue_attachments.services.outputs import get_output_sink

logger = logging.getLogger(__name__)


def build_request(settings: Settings) -> IngestionRequest:
    """Turn environment settings into an ``IngestionRequest``.

    Raises:
        ConfigurationError: If a required variable is unset.
    """
    missing = settings.missing_required
    if missing:
        raise ConfigurationError(
            "Required environment variables are missing: "
            + ", ".join(missing)
        )
    return IngestionRequest(
        token=settings.GITHUB_TOKEN,
        issue_number=settings.ISSUE_NUMBER,
        comment_id=settings.COMMENT_ID,
        comment_body=settings.COMMENT_BODY,
        repository=settings.GITHUB_REPOSITORY,
    )


def main() -> int:
    """Run one ingestion and return the process exit code."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        setup_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    setup_logging(
        settings.LOG_LEVEL,
        json_format=settings.LOG_JSON,
        issue_number=settings.ISSUE_NUMBER or "-",
    )
    logger.info("Starting %s %s", settings.APP_NAME, get_version())

    try:
        request = build_request(settings)
        ingest_comment_files(
            request,
            sink=get_output_sink(settings),
            base_dir=Path(settings.UPLOAD_BASE_DIR),
        )
    except IngestionError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0
