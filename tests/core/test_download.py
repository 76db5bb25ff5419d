"""
Tests for the HTTP download module.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests
import responses

from swiftkit.core.download import (
    DownloadProgress,
    HttpDownloader,
    download_file,
    format_progress,
    log_progress,
)
from swiftkit.core.exceptions import DownloadError

URL = "https://swift.org/builds/swift-5.9-release/ubuntu2004/swift-5.9-RELEASE/swift-5.9-RELEASE-ubuntu20.04.tar.gz"


class TestDownloadFile:
    """Test download_file()."""

    @responses.activate
    def test_writes_body_to_destination(self, tmp_path):
        """Response body ends up in the destination file."""
        responses.add(responses.GET, URL, body=b"toolchain bytes", status=200)

        destination = tmp_path / "out" / "swift.tar.gz"
        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == b"toolchain bytes"

    @responses.activate
    def test_http_error_raises_download_error(self, tmp_path):
        """A 404 becomes DownloadError naming the URL."""
        responses.add(responses.GET, URL, status=404)

        destination = tmp_path / "swift.tar.gz"
        with pytest.raises(DownloadError, match="Failed to download"):
            download_file(URL, destination)

        assert not destination.exists()

    @responses.activate
    def test_connection_error_leaves_no_partial_file(self, tmp_path):
        """Transport errors are wrapped and the destination is cleaned up."""
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("reset")
        )

        destination = tmp_path / "swift.tar.gz"
        with pytest.raises(DownloadError):
            download_file(URL, destination)

        assert not destination.exists()

    def test_incomplete_body_is_rejected(self, tmp_path):
        """A body shorter than Content-Length fails and is removed."""
        response = MagicMock()
        response.__enter__.return_value = response
        response.headers = {"content-length": "100"}
        response.iter_content.return_value = [b"short"]

        destination = tmp_path / "swift.tar.gz"
        with patch("swiftkit.core.download.requests.get", return_value=response):
            with pytest.raises(DownloadError, match="Incomplete download"):
                download_file(URL, destination)

        assert not destination.exists()

    @responses.activate
    def test_progress_callback_reports_completion(self, tmp_path):
        """The final chunk always produces a progress update."""
        body = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=body,
            status=200,
            headers={"Content-Length": str(len(body))},
        )

        updates = []
        download_file(URL, tmp_path / "swift.tar.gz", progress_callback=updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == len(body)
        assert updates[-1].percentage == pytest.approx(100.0)

    @responses.activate
    def test_uses_given_session(self, tmp_path):
        """A supplied session is used for the request."""
        responses.add(responses.GET, URL, body=b"data", status=200)

        with requests.Session() as session:
            download_file(URL, tmp_path / "swift.tar.gz", session=session)

        assert len(responses.calls) == 1

    def test_empty_url_rejected(self, tmp_path):
        """An empty URL is a programming error."""
        with pytest.raises(ValueError):
            download_file("", tmp_path / "file")


class TestHttpDownloader:
    """Test HttpDownloader."""

    @responses.activate
    def test_downloads_into_directory(self, tmp_path):
        """Files land inside the requested directory."""
        responses.add(responses.GET, URL, body=b"payload", status=200)

        path = HttpDownloader().download(URL, tmp_path)

        assert path.parent == tmp_path
        assert path.read_bytes() == b"payload"

    @responses.activate
    def test_same_url_twice_gets_distinct_files(self, tmp_path):
        """Generated names never collide."""
        responses.add(responses.GET, URL, body=b"payload", status=200)
        responses.add(responses.GET, URL, body=b"payload", status=200)

        downloader = HttpDownloader()
        first = downloader.download(URL, tmp_path)
        second = downloader.download(URL, tmp_path)

        assert first != second
        assert first.exists() and second.exists()

    @responses.activate
    def test_failure_raises_download_error(self, tmp_path):
        """Server errors propagate as DownloadError."""
        responses.add(responses.GET, URL, status=500)

        with pytest.raises(DownloadError):
            HttpDownloader(timeout=5).download(URL, tmp_path)

        assert list(tmp_path.iterdir()) == []

    @responses.activate
    def test_progress_logged(self, tmp_path, caplog):
        body = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=body,
            status=200,
            headers={"Content-Length": str(len(body))},
        )

        with caplog.at_level(logging.INFO, logger="swiftkit.core.download"):
            HttpDownloader(progress_callback=log_progress).download(URL, tmp_path)

        assert any("(100.0%)" in r.getMessage() for r in caplog.records)


class TestFormatProgress:
    """Test progress formatting."""

    def test_known_total(self):
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        assert format_progress(progress) == "50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s"

    def test_unknown_total(self):
        progress = DownloadProgress(1048576, 0, 0, 1048576, 0)
        assert format_progress(progress) == "1.0 MB at 1.0 MB/s"

    def test_log_progress(self, caplog):
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)

        with caplog.at_level(logging.INFO, logger="swiftkit.core.download"):
            log_progress(progress)

        assert caplog.records[0].levelno == logging.INFO
        assert caplog.records[0].getMessage() == (
            "Downloaded 50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s"
        )
