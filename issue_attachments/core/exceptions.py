"""
Fatal error types.

Anything derived from ``IngestionError`` aborts the whole run and
maps to exit code 1.  Per-URL problems are *not* represented here;
they live in ``issue_attachments.services.downloader`` and only
ever cause that one URL to be skipped.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for errors that abort an ingestion run."""


class ConfigurationError(IngestionError):
    """Raised when required environment variables are missing."""


class InvalidIssueNumberError(IngestionError, ValueError):
    """Raised when the issue number is not purely numeric."""


class PathTraversalError(IngestionError, ValueError):
    """Raised when a computed path escapes its base directory."""
