"""Models describing the outcome of an ingestion run."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IngestionManifest(BaseModel):
    """Persisted as ``metadata.json`` next to the ingested files."""

    issue_number: str = Field(
        ...,
        description="Issue the files were attached to",
    )
    comment_id: str = Field(
        ...,
        description="Comment the files were attached to",
    )
    files: list[str] = Field(
        default_factory=list,
        description="Written file paths, in write order",
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="UTC creation time (ISO-8601 when serialised)",
    )


class IngestionResult(BaseModel):
    """What a run wrote and what it had to skip."""

    files: list[str] = Field(
        default_factory=list,
        description="Written file paths, in write order",
    )
    skipped: list[str] = Field(
        default_factory=list,
        description="Candidate URLs that could not be ingested",
    )
    manifest_path: str | None = Field(
        default=None,
        description="Path of ``metadata.json`` when one was written",
    )

    @property
    def files_processed(self) -> bool:
        """``True`` when at least one file was written."""
        return bool(self.files)
