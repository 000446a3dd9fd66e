"""
Centralised constants used across the application.

Keeping limits, names and output keys in one place makes it easy
to audit the trust boundary and keeps ``grep`` useful when
debugging.
"""

from __future__ import annotations

# ── Size limits ─────────────────────────────────────────────────────────────
# GitHub caps files attached to issues / PRs at 25 MB each.

MAX_FILE_SIZE: int = 25 * 1024 * 1024
"""Maximum number of bytes accepted for a single attachment."""

MAX_FILENAME_LENGTH: int = 200
"""Maximum filename length (255 is the common limit)."""

DOWNLOAD_CHUNK_SIZE: int = 65_536
"""Bytes read per iteration while streaming a response body."""

# ── Trusted origins ─────────────────────────────────────────────────────────

PRIMARY_HOST: str = "github.com"
"""The only host accepted as an exact match."""

CONTENT_HOST: str = "githubusercontent.com"
"""Content-delivery host; itself and any subdomain are accepted."""

RAW_CONTENT_HOST: str = "raw.githubusercontent.com"

IMAGE_HOSTS: frozenset[str] = frozenset(
    {
        PRIMARY_HOST,
        "user-images.githubusercontent.com",
    }
)
"""Hosts whose markdown images are treated as attachments."""

# ── Filenames ───────────────────────────────────────────────────────────────

DEFAULT_EXTENSION: str = ".bin"
"""Appended to URL filenames that carry no extension."""

PLACEHOLDER_FILENAME: str = "file"
"""Used when sanitisation leaves nothing behind."""

RESERVED_DEVICE_NAMES: frozenset[str] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)
"""Windows device names that cannot be used as a file stem."""

# ── On-disk layout ──────────────────────────────────────────────────────────

TARGET_DIR_PREFIX: str = "issue_"
"""Per-issue directories are named ``issue_<number>``."""

METADATA_FILENAME: str = "metadata.json"
"""Manifest written next to the ingested files."""

# ── Workflow outputs ────────────────────────────────────────────────────────

OUTPUT_FILES_PROCESSED: str = "files_processed"
"""``true`` when at least one file was written."""

OUTPUT_FILE_LIST: str = "file_list"
"""Markdown bullet list of the written paths."""
