"""
Network download manager with progress tracking.

This module provides the HTTP side of the install pipeline:
- HTTP/HTTPS downloads with TLS verification
- Streaming to disk with progress reporting (bytes, percentage, speed, ETA)
- Removal of partial files when a transfer fails

Downloads are never retried here; a caller that wants retries wraps the
whole install.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from swiftkit.core.exceptions import DownloadError
from swiftkit.core.interfaces import Downloader

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds (None waits indefinitely)
        session: Optional requests session to reuse connections

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the transfer fails; no partial file is left behind
        ValueError: If URL or destination is invalid

    Example:
        >>> from swiftkit.core.download import download_file
        >>> download_file(
        ...     "https://swift.org/keys/all-keys.asc",
        ...     Path("/tmp/all-keys.asc"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    try:
        return _download_with_progress(
            url=url,
            destination=destination,
            progress_callback=progress_callback,
            timeout=timeout,
            session=session,
        )
    except (RequestException, OSError) as e:
        if destination.exists():
            destination.unlink()
            logger.debug(f"Removed partial download: {destination}")
        raise DownloadError(f"Failed to download {url}: {e}") from e


def _download_with_progress(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: Optional[float],
    session: Optional[requests.Session],
) -> Path:
    """
    Perform download with streaming and progress updates.

    This is an internal function called by download_file().

    Raises:
        RequestException: If HTTP request fails
        OSError: If the destination cannot be written
    """
    logger.debug(f"Downloading from {url}")

    getter = session.get if session is not None else requests.get
    response = getter(url, stream=True, timeout=timeout, allow_redirects=True)

    with response:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                # Report progress at most twice per second
                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    speed = downloaded / elapsed if elapsed > 0 else 0
                    remaining = total_size - downloaded if total_size > 0 else 0
                    eta = remaining / speed if speed > 0 else 0

                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size if total_size > 0 else downloaded,
                            percentage=(downloaded / total_size * 100)
                            if total_size > 0
                            else 0,
                            speed_bps=speed,
                            eta_seconds=eta,
                        )
                    )
                    last_progress_time = current_time

    if total_size and downloaded != total_size:
        raise RequestException(
            f"Incomplete download: received {downloaded} of {total_size} bytes"
        )

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


def log_progress(progress: DownloadProgress) -> None:
    """Progress callback that reports through the module logger."""
    logger.info(f"Downloaded {format_progress(progress)}")


class HttpDownloader(Downloader):
    """
    Downloader backed by requests.

    Each download lands in a uniquely named file inside the requested
    directory, so concurrent downloads into the same directory never collide.
    The session is shared between threads only for connection pooling; each
    download opens its own streamed response.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.timeout = timeout
        self.session = session
        self.progress_callback = progress_callback

    def download(self, url: str, directory: Path) -> Path:
        destination = Path(directory) / str(uuid.uuid4())
        return download_file(
            url,
            destination,
            progress_callback=self.progress_callback,
            timeout=self.timeout,
            session=self.session,
        )


__all__ = [
    "DownloadProgress",
    "download_file",
    "format_progress",
    "log_progress",
    "HttpDownloader",
]
