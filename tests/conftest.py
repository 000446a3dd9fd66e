"""Shared pytest fixtures for the issue-attachments test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from issue_attachments.schemas import IngestionRequest

# ── Output sink ─────────────────────────────────────────────────────────────


class RecordingSink:
    """In-memory ``OutputSink`` that remembers every emitted output."""

    def __init__(self) -> None:
        self.emitted: list[tuple[str, str]] = []

    def emit(self, key: str, value: str) -> None:
        self.emitted.append((key, value))

    @property
    def outputs(self) -> dict[str, str]:
        """Last value emitted per key."""
        return dict(self.emitted)


@pytest.fixture
def sink() -> RecordingSink:
    """Return a fresh recording sink."""
    return RecordingSink()


# ── Filesystem ─────────────────────────────────────────────────────────────


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Upload base directory inside pytest's temporary directory."""
    return tmp_path / "uploaded_files"


# ── Requests ───────────────────────────────────────────────────────────────


@pytest.fixture
def make_request():
    """Factory for ``IngestionRequest`` objects with test defaults.

    Usage::

        def test_something(make_request):
            request = make_request(comment_body="see ![x](...)")
    """

    def _make(**overrides: Any) -> IngestionRequest:
        data: dict[str, Any] = {
            "token": "test-token",
            "issue_number": "42",
            "comment_id": "1001",
            "comment_body": "",
            "repository": "octo/widgets",
        }
        data.update(overrides)
        return IngestionRequest(**data)

    return _make


# ── httpx mocks ────────────────────────────────────────────────────────────


def build_mock_client(
    *,
    headers: dict[str, str] | None = None,
    chunks: list[bytes] | None = None,
) -> tuple[MagicMock, MagicMock]:
    """Return ``(client, response)`` mocks shaped like ``httpx.Client``.

    ``client.stream(...)`` yields *response* as a context manager;
    ``response.iter_bytes()`` returns *chunks*.
    """
    mock_response = MagicMock()
    mock_response.headers = headers or {}
    mock_response.raise_for_status = MagicMock()
    mock_response.iter_bytes.return_value = chunks or []
    mock_response.__enter__ = lambda s: mock_response
    mock_response.__exit__ = MagicMock(return_value=False)

    mock_client = MagicMock()
    mock_client.stream.return_value = mock_response
    mock_client.__enter__ = lambda s: mock_client
    mock_client.__exit__ = MagicMock(return_value=False)
    return mock_client, mock_response


@pytest.fixture
def download_settings():
    """Mock settings with the download knobs used by ``fetch_file``."""
    settings = MagicMock()
    settings.DOWNLOAD_TIMEOUT = 30
    settings.DOWNLOAD_RETRIES = 2
    return settings


@pytest.fixture
def mock_http_client():
    """Expose ``build_mock_client`` to tests as a fixture."""
    return build_mock_client
