"""
Origin allow-listing and filesystem containment checks.

Two trust boundaries live here:

- **Network egress**: ``is_allowed_domain`` decides whether a URL
  may be fetched at all.  It must be consulted *before* any request
  is issued; there is no configuration that widens the allow-list.
- **Filesystem placement**: ``ensure_within_directory`` verifies
  that a resolved path is a strict descendant of a base directory,
  so neither a crafted issue number nor a crafted filename can
  write outside the upload area.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import urlparse

from issue_attachments.core.constants import CONTENT_HOST, PRIMARY_HOST
from issue_attachments.core.exceptions import (
    InvalidIssueNumberError,
    PathTraversalError,
)

logger = logging.getLogger(__name__)

_ISSUE_NUMBER_RE = re.compile(r"[0-9]+")


def is_allowed_domain(url: str) -> bool:
    """Return ``True`` if *url* points at a trusted GitHub host.

    Accepts ``github.com`` exactly, plus ``githubusercontent.com``
    and any of its subdomains (``raw.``, ``user-images.``,
    ``objects.`` …).  Hostname comparison works on the parsed
    host, so ``https://evil.com/github.com/x`` and
    ``https://github.com@evil.com/`` are both rejected.

    Args:
        url: Candidate URL string.

    Returns:
        ``False`` for untrusted hosts and for anything that does
        not parse into a URL with a hostname.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    return (
        hostname == PRIMARY_HOST
        or hostname == CONTENT_HOST
        or hostname.endswith("." + CONTENT_HOST)
    )


def validate_issue_number(issue_number: str) -> str:
    """Ensure *issue_number* contains only ASCII digits.

    Raises:
        InvalidIssueNumberError: If the value is empty or contains
            anything other than ``0-9``.
    """
    if not _ISSUE_NUMBER_RE.fullmatch(issue_number):
        raise InvalidIssueNumberError(
            f"Invalid issue number format: {issue_number!r}"
        )
    return issue_number


def ensure_within_directory(base_dir: Path, candidate: Path) -> Path:
    """Resolve *candidate* and require it to live strictly inside *base_dir*.

    Both paths are resolved (symlinks and ``..`` collapsed) before
    comparison.  The base directory itself is not an acceptable
    result.

    Args:
        base_dir: Directory the candidate must be nested under.
        candidate: Path to check; relative paths are resolved
            against the current working directory.

    Returns:
        The resolved candidate path.

    Raises:
        PathTraversalError: If the resolved candidate is the base
            directory or lies outside it.
    """
    base = base_dir.resolve()
    resolved = candidate.resolve()
    if resolved == base or not resolved.is_relative_to(base):
        logger.error(
            "Path traversal detected: %s is not inside %s",
            resolved,
            base,
        )
        raise PathTraversalError(
            f"Path {resolved} escapes base directory {base}"
        )
    return resolved
