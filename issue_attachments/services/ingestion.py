"""
Ingestion orchestrator: coordinates extraction, download, naming,
and persistence for one issue comment.

Runs strictly sequentially: each candidate URL is downloaded,
named, given a unique path and written before the next one is
touched, so the collision check in ``ensure_unique_path`` always
sees a consistent directory.

Failure tiers:

- **Fatal** (``IngestionError``): malformed issue number, a target
  directory or file path escaping the base directory.  Raised to
  the caller before anything further is written.
- **Recoverable**: any download refusal or failure.  Logged, the
  URL is recorded as skipped and the run continues.
"""

from __future__ import annotations

import logging
from pathlib import Path

from issue_attachments.core.config import get_settings
from issue_attachments.core.constants import (
    METADATA_FILENAME,
    OUTPUT_FILE_LIST,
    OUTPUT_FILES_PROCESSED,
    TARGET_DIR_PREFIX,
)
from issue_attachments.core.security import (
    ensure_within_directory,
    validate_issue_number,
)
from issue_attachments.schemas import (
    IngestionManifest,
    IngestionRequest,
    IngestionResult,
)
from issue_attachments.services.downloader import download_file
from issue_attachments.services.filenames import (
    ensure_unique_path,
    filename_from_url,
)
from issue_attachments.services.outputs import OutputSink
from issue_attachments.services.url_extractor import extract_file_urls

logger = logging.getLogger(__name__)


def resolve_target_directory(base_dir: Path, issue_number: str) -> Path:
    """Return the guarded ``<base>/issue_<n>`` directory path.

    Args:
        base_dir: Root of the upload area.
        issue_number: Untrusted issue number.

    Returns:
        The resolved target directory (not created).

    Raises:
        InvalidIssueNumberError: If *issue_number* is not numeric.
            Checked before any path is built.
        PathTraversalError: If the target is not strictly inside
            *base_dir*.
    """
    validate_issue_number(issue_number)
    base = base_dir.resolve()
    return ensure_within_directory(
        base,
        base / f"{TARGET_DIR_PREFIX}{issue_number}",
    )


def format_file_list(files: list[str]) -> str:
    """Render written paths as a markdown bullet list."""
    return "\n".join(f"- `{path}`" for path in files)


def _write_new_file(path: Path, content: bytes) -> bool:
    """Create *path* exclusively; ``False`` if it appeared meanwhile."""
    try:
        with path.open("xb") as fh:
            fh.write(content)
    except FileExistsError:
        logger.warning(
            "Skipping %s: file was created by another writer",
            path,
        )
        return False
    return True


def _ingest_url(url: str, token: str, target_dir: Path) -> Path | None:
    """Download *url* into *target_dir*; ``None`` when skipped."""
    content = download_file(url, token)
    if content is None:
        return None

    filename = filename_from_url(url)
    candidate = ensure_unique_path(
        target_dir,
        filename,
        reserved={METADATA_FILENAME},
    )
    file_path = ensure_within_directory(target_dir, candidate)

    if not _write_new_file(file_path, content):
        return None
    logger.info("Saved: %s (%d bytes)", file_path, len(content))
    return file_path


def _write_manifest(target_dir: Path, manifest: IngestionManifest) -> Path:
    """Write *manifest* as ``metadata.json``; replaces an older one."""
    path = target_dir / METADATA_FILENAME
    path.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Wrote manifest %s", path)
    return path


def ingest_comment_files(
    request: IngestionRequest,
    *,
    sink: OutputSink,
    base_dir: Path | None = None,
) -> IngestionResult:
    """Download every trusted attachment referenced by a comment.

    Emits ``files_processed`` (``true`` / ``false``) through *sink*
    and, when files were written, ``file_list``.

    Args:
        request: Comment context and credential.
        sink: Where workflow outputs are published.
        base_dir: Root of the upload area.  Defaults to
            ``UPLOAD_BASE_DIR`` resolved against the working
            directory.

    Returns:
        The written paths (in write order), the skipped URLs and
        the manifest path when one was written.

    Raises:
        InvalidIssueNumberError: If the issue number is not numeric.
        PathTraversalError: If a computed path escapes the upload
            area.
        OSError: If the target directory or a file cannot be
            written.
    """
    if base_dir is None:
        base_dir = Path(get_settings().UPLOAD_BASE_DIR)
    target_dir = resolve_target_directory(base_dir, request.issue_number)
    target_dir.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Processing comment %s on %s/%s#%s",
        request.comment_id,
        request.owner,
        request.repo,
        request.issue_number,
    )

    result = IngestionResult()
    urls = extract_file_urls(request.comment_body)
    if not urls:
        logger.info("No file URLs found in the comment")
        sink.emit(OUTPUT_FILES_PROCESSED, "false")
        return result

    logger.info("Found %d file(s) to download", len(urls))

    for url in urls:
        logger.info("Processing: %s", url)
        path = _ingest_url(url, request.token, target_dir)
        if path is None:
            result.skipped.append(url)
            continue
        result.files.append(str(path))

    if not result.files:
        logger.info("No files were successfully downloaded")
        sink.emit(OUTPUT_FILES_PROCESSED, "false")
        return result

    manifest = IngestionManifest(
        issue_number=request.issue_number,
        comment_id=request.comment_id,
        files=result.files,
    )
    result.manifest_path = str(_write_manifest(target_dir, manifest))

    sink.emit(OUTPUT_FILES_PROCESSED, "true")
    sink.emit(OUTPUT_FILE_LIST, format_file_list(result.files))

    logger.info(
        "Successfully processed %d file(s), skipped %d",
        len(result.files),
        len(result.skipped),
    )
    return result
