"""Ingestion request model built from the workflow environment."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IngestionRequest(BaseModel):
    """Everything a single ingestion run needs to know about a comment.

    The issue number is kept as an untrusted string; it is checked
    by the pipeline before it is used to build a path.
    """

    token: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Bearer credential for downloads",
    )
    issue_number: str = Field(
        ...,
        description="Issue the comment belongs to (digits only)",
    )
    comment_id: str = Field(
        ...,
        min_length=1,
        description="Opaque comment identifier stored in the manifest",
    )
    comment_body: str = Field(
        default="",
        description="Raw comment text to scan for attachments",
    )
    repository: str = Field(
        ...,
        min_length=1,
        description="``owner/name`` coordinate of the repository",
    )

    @property
    def owner(self) -> str:
        """Repository owner (text before the first ``/``)."""
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        """Repository name (text after the first ``/``, may be empty)."""
        parts = self.repository.split("/", 1)
        return parts[1] if len(parts) > 1 else ""
