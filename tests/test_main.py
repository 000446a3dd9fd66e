"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from issue_attachments.core.config import Settings
from issue_attachments.core.exceptions import ConfigurationError
from issue_attachments.main import build_request, main


def _settings(**overrides) -> Settings:
    values = {
        "GITHUB_TOKEN": "tok",
        "ISSUE_NUMBER": "42",
        "COMMENT_ID": "1001",
        "GITHUB_REPOSITORY": "octo/widgets",
        "COMMENT_BODY": "",
        "GITHUB_OUTPUT": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep pytest's log capture handlers in place."""
    with patch("issue_attachments.main.setup_logging"):
        yield


class TestBuildRequest:
    """Tests for ``build_request``."""

    def test_builds_request(self):
        """All context variables flow into the request."""
        request = build_request(_settings(COMMENT_BODY="hi"))
        assert request.token == "tok"
        assert request.issue_number == "42"
        assert request.comment_id == "1001"
        assert request.repository == "octo/widgets"
        assert request.comment_body == "hi"

    def test_missing_variables(self):
        """Missing required variables raise ``ConfigurationError``."""
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN, COMMENT_ID"):
            build_request(_settings(GITHUB_TOKEN="", COMMENT_ID=""))


class TestMain:
    """Exit-code mapping of ``main``."""

    @patch("issue_attachments.main.ingest_comment_files")
    @patch("issue_attachments.main.get_settings")
    def test_success_returns_zero(self, mock_gs, mock_ingest):
        """A normal run exits 0."""
        mock_gs.return_value = _settings()
        assert main() == 0
        mock_ingest.assert_called_once()

    @patch("issue_attachments.main.ingest_comment_files")
    @patch("issue_attachments.main.get_settings")
    def test_missing_config_returns_one(self, mock_gs, mock_ingest):
        """Missing configuration exits 1 without ingesting."""
        mock_gs.return_value = _settings(GITHUB_REPOSITORY="")
        assert main() == 1
        mock_ingest.assert_not_called()

    @patch("issue_attachments.main.get_settings")
    def test_invalid_config_returns_one(self, mock_gs):
        """Settings validation errors exit 1."""
        mock_gs.side_effect = ValidationError.from_exception_data(
            "Settings",
            [],
        )
        assert main() == 1

    @patch("issue_attachments.main.ingest_comment_files")
    @patch("issue_attachments.main.get_settings")
    def test_unexpected_error_returns_one(self, mock_gs, mock_ingest):
        """Any unhandled exception exits 1."""
        mock_gs.return_value = _settings()
        mock_ingest.side_effect = OSError("disk full")
        assert main() == 1

    @patch("issue_attachments.main.get_settings")
    def test_invalid_issue_number_end_to_end(
        self,
        mock_gs,
        tmp_path: Path,
        monkeypatch,
    ):
        """A crafted issue number exits 1 and creates nothing."""
        monkeypatch.chdir(tmp_path)
        mock_gs.return_value = _settings(
            ISSUE_NUMBER="../../tmp",
            GITHUB_OUTPUT=str(tmp_path / "out"),
        )
        assert main() == 1
        assert not (tmp_path / "uploaded_files").exists()
        assert not (tmp_path / "out").exists()

    @patch("issue_attachments.main.get_settings")
    def test_no_files_end_to_end(self, mock_gs, tmp_path: Path, monkeypatch):
        """No URLs exits 0 and reports ``files_processed=false``."""
        monkeypatch.chdir(tmp_path)
        out = tmp_path / "out"
        mock_gs.return_value = _settings(
            COMMENT_BODY="nothing to see",
            GITHUB_OUTPUT=str(out),
        )

        assert main() == 0
        assert out.read_text(encoding="utf-8") == "files_processed=false\n"
        assert (tmp_path / "uploaded_files" / "issue_42").is_dir()

    @patch("issue_attachments.services.ingestion.download_file")
    @patch("issue_attachments.main.get_settings")
    def test_files_end_to_end(
        self,
        mock_gs,
        mock_download,
        tmp_path: Path,
        monkeypatch,
    ):
        """Downloaded files are reported through ``GITHUB_OUTPUT``."""
        monkeypatch.chdir(tmp_path)
        out = tmp_path / "out"
        mock_download.return_value = b"img"
        mock_gs.return_value = _settings(
            COMMENT_BODY="![x](https://user-images.githubusercontent.com/1/a.png)",
            GITHUB_OUTPUT=str(out),
            UPLOAD_BASE_DIR=str(tmp_path / "uploaded_files"),
        )

        assert main() == 0

        written = (tmp_path / "uploaded_files").resolve() / "issue_42" / "a.png"
        assert written.read_bytes() == b"img"
        assert out.read_text(encoding="utf-8") == (
            f"files_processed=true\nfile_list=- `{written}`\n"
        )
