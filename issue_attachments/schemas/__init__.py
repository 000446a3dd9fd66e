"""
Pydantic models for ingestion requests, results and manifests.

Every public model is re-exported from this ``__init__`` so that
``from issue_attachments.schemas import IngestionRequest`` works.
"""

from issue_attachments.schemas.requests import IngestionRequest
from issue_attachments.schemas.results import (
    IngestionManifest,
    IngestionResult,
)

__all__ = [
    "IngestionManifest",
    "IngestionRequest",
    "IngestionResult",
]
