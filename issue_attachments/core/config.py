"""
Application configuration and settings.

Centralises all external configuration (env-vars / .env) and
version discovery.  The workflow that triggers a run passes the
comment context through environment variables; the names match
the ones GitHub Actions exposes so the job definition stays
short.
"""

from __future__ import annotations

import importlib.metadata
import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# ── Package version ─────────────────────────────────────────────────────────


def get_version() -> str:
    """Return the installed package version.

    Falls back to ``"0.0.0-dev"`` when the package metadata
    is not available (e.g. when running from a source checkout).

    Returns:
        Semantic version string.
    """
    try:
        return importlib.metadata.version("issue-attachments")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


# ── Settings ────────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # General
    APP_NAME: str = "Issue Attachments"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Comment context (populated by the workflow)
    GITHUB_TOKEN: str = ""
    ISSUE_NUMBER: str = ""
    COMMENT_BODY: str = ""
    COMMENT_ID: str = ""
    GITHUB_REPOSITORY: str = ""

    # Path of the workflow output file; stdout when unset
    GITHUB_OUTPUT: str = ""

    # ── Storage ─────────────────────────────────────────────────────
    UPLOAD_BASE_DIR: str = "uploaded_files"

    # ── Downloads ───────────────────────────────────────────────────
    DOWNLOAD_TIMEOUT: int = 30  # seconds
    DOWNLOAD_RETRIES: int = 2  # extra attempts on transport errors

    @field_validator("DOWNLOAD_TIMEOUT", "DOWNLOAD_RETRIES")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        """Reject negative timeouts and retry counts."""
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @property
    def missing_required(self) -> list[str]:
        """Names of required comment-context variables that are unset."""
        required = {
            "GITHUB_TOKEN": self.GITHUB_TOKEN,
            "ISSUE_NUMBER": self.ISSUE_NUMBER,
            "COMMENT_ID": self.COMMENT_ID,
            "GITHUB_REPOSITORY": self.GITHUB_REPOSITORY,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Using ``lru_cache`` ensures the .env file is read exactly
    once.  Tests build ``Settings(_env_file=None, ...)`` directly
    or patch this function.
    """
    return Settings()
