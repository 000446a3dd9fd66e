"""
Safe filename derivation and collision-free path resolution.

``filename_from_url`` and ``sanitize_filename`` are pure: the same
URL always maps to the same name.  Uniqueness inside a target
directory is handled separately by ``ensure_unique_path``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Collection
from pathlib import Path

from issue_attachments.core.constants import (
    DEFAULT_EXTENSION,
    MAX_FILENAME_LENGTH,
    PLACEHOLDER_FILENAME,
    RESERVED_DEVICE_NAMES,
)

logger = logging.getLogger(__name__)

# Path separators, quotes, wildcards and control characters.
_INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')

# Leading / trailing dots and whitespace ("..png", " evil.exe ").
_EDGE_DOTS_SPACES_RE = re.compile(r"^[\s.]+|[\s.]+$")


def _split_extension(filename: str) -> tuple[str, str]:
    """Split *filename* into ``(stem, ext)`` at the last dot."""
    stem, ext = os.path.splitext(filename)
    return stem, ext


def sanitize_filename(filename: str) -> str:
    """Make *filename* safe to create on any common filesystem.

    Steps, in order:

    1. Replace every disallowed character with ``_``.
    2. Strip leading and trailing dots and whitespace.
    3. Prefix ``_`` when the part before the first dot is a
       Windows device name (``CON``, ``LPT1`` …), case-insensitive.
    4. Truncate to ``MAX_FILENAME_LENGTH`` characters, cutting the
       stem and keeping the extension.
    5. Fall back to ``PLACEHOLDER_FILENAME`` when nothing is left.

    Args:
        filename: Untrusted filename.

    Returns:
        The sanitised filename.
    """
    name = _INVALID_CHARS_RE.sub("_", filename)
    name = _EDGE_DOTS_SPACES_RE.sub("", name)

    if name.split(".")[0].upper() in RESERVED_DEVICE_NAMES:
        name = f"_{name}"

    if len(name) > MAX_FILENAME_LENGTH:
        stem, ext = _split_extension(name)
        if len(ext) < MAX_FILENAME_LENGTH:
            name = stem[: MAX_FILENAME_LENGTH - len(ext)] + ext
        else:
            name = name[:MAX_FILENAME_LENGTH]

    return name or PLACEHOLDER_FILENAME


def filename_from_url(url: str) -> str:
    """Derive a sanitised filename from the last segment of *url*.

    Names without a dot get ``DEFAULT_EXTENSION`` so downstream
    tooling does not guess the type.

    Examples:
        >>> filename_from_url("https://github.com/o/r/assets/1/report.pdf")
        'report.pdf'
        >>> filename_from_url("https://github.com/user-attachments/files/7/blob")
        'blob.bin'
    """
    filename = url.rsplit("/", 1)[-1] or PLACEHOLDER_FILENAME
    if "." not in filename:
        filename = f"{filename}{DEFAULT_EXTENSION}"
    return sanitize_filename(filename)


def ensure_unique_path(
    directory: Path,
    filename: str,
    *,
    reserved: Collection[str] = (),
) -> Path:
    """Return a path in *directory* that does not exist yet.

    Tries ``filename`` first, then ``<stem>_1<ext>``,
    ``<stem>_2<ext>`` and so on.  Dangling symlinks count as
    existing.  Names listed in *reserved* are skipped even when
    absent from disk.

    The existence check and the later write are not atomic; this
    is only safe while a single run writes to *directory*.

    Args:
        directory: Target directory.
        filename: Already-sanitised candidate name.
        reserved: Names that must never be returned.

    Returns:
        The first free candidate path.
    """
    stem, ext = _split_extension(filename)
    candidate = directory / filename
    counter = 1
    while candidate.name in reserved or os.path.lexists(candidate):
        candidate = directory / f"{stem}_{counter}{ext}"
        counter += 1

    if counter > 1:
        logger.debug(
            "Renamed %s to %s to avoid a collision",
            filename,
            candidate.name,
        )
    return candidate
