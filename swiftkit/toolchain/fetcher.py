"""
Swift release artifact resolution and download.

A release is published as a tarball plus a detached signature next to it on
the Swift download host. The URL layout is fixed by the host:

    https://swift.org/builds/swift-5.9-release/ubuntu2004/swift-5.9-RELEASE/
        swift-5.9-RELEASE-ubuntu20.04.tar.gz
        swift-5.9-RELEASE-ubuntu20.04.tar.gz.sig
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path

from swiftkit.core.defaults import DEFAULT_DOWNLOAD_HOST
from swiftkit.core.exceptions import DownloadError
from swiftkit.core.interfaces import Downloader

logger = logging.getLogger(__name__)

PLATFORM_FAMILY = "ubuntu"
ARCHIVE_SUFFIX = ".tar.gz"
SIGNATURE_SUFFIX = ".sig"
WAIT_INTERVAL = 0.1  # seconds


@dataclass(frozen=True)
class ArtifactLocation:
    """Where a release lives on the download host."""

    archive_name: str
    """Archive base name, also the top-level directory inside the archive"""

    payload_url: str
    """URL of the toolchain tarball"""

    signature_url: str
    """URL of the detached signature"""


@dataclass(frozen=True)
class FetchedArtifact:
    """A downloaded release, valid only for the install attempt that fetched it."""

    payload_path: Path
    signature_path: Path
    archive_name: str


def build_archive_name(version: str, platform_version: str) -> str:
    """
    Name of the release archive (without extension).

    Example:
        >>> build_archive_name("5.9", "20.04")
        'swift-5.9-RELEASE-ubuntu20.04'
    """
    return f"swift-{version.upper()}-RELEASE-{PLATFORM_FAMILY}{platform_version}"


def resolve_artifact(
    version: str, platform_version: str, host: str = DEFAULT_DOWNLOAD_HOST
) -> ArtifactLocation:
    """
    Resolve a version and platform release to download URLs.

    Args:
        version: Swift version (e.g., '5.9')
        platform_version: Platform release (e.g., '20.04')
        host: Download host base URL

    Returns:
        ArtifactLocation for the release

    Raises:
        ValueError: If version is empty or platform_version has no digits

    Example:
        >>> location = resolve_artifact("5.9", "20.04")
        >>> location.payload_url
        'https://swift.org/builds/swift-5.9-release/ubuntu2004/swift-5.9-RELEASE/swift-5.9-RELEASE-ubuntu20.04.tar.gz'
    """
    if not version or not version.strip():
        raise ValueError("Version cannot be empty")

    platform_token = re.sub(r"\D", "", platform_version)
    if not platform_token:
        raise ValueError(f"Platform version has no digits: {platform_version!r}")

    version_upper = version.upper()
    archive_name = build_archive_name(version, platform_version)
    payload_url = (
        f"{host.rstrip('/')}/swift-{version.lower()}-release/"
        f"{PLATFORM_FAMILY}{platform_token}/swift-{version_upper}-RELEASE/"
        f"{archive_name}{ARCHIVE_SUFFIX}"
    )

    return ArtifactLocation(
        archive_name=archive_name,
        payload_url=payload_url,
        signature_url=f"{payload_url}{SIGNATURE_SUFFIX}",
    )


class ArtifactFetcher:
    """
    Downloads a release archive and its signature.

    The two downloads are independent and run concurrently; the fetch
    completes only when both have.
    """

    def __init__(self, downloader: Downloader, host: str = DEFAULT_DOWNLOAD_HOST):
        self.downloader = downloader
        self.host = host

    def fetch(
        self, version: str, platform_version: str, work_dir: Path
    ) -> FetchedArtifact:
        """
        Download the release archive and detached signature.

        Args:
            version: Swift version
            platform_version: Platform release
            work_dir: Directory receiving both files

        Returns:
            FetchedArtifact with both local paths

        Raises:
            DownloadError: If either download fails
        """
        try:
            location = resolve_artifact(version, platform_version, self.host)
        except ValueError as e:
            raise DownloadError(str(e)) from e

        logger.debug(f"Downloading swift {version} for ubuntu {platform_version}")

        executor = ThreadPoolExecutor(max_workers=2)
        try:
            payload_future = executor.submit(
                self.downloader.download, location.payload_url, work_dir
            )
            signature_future = executor.submit(
                self.downloader.download, location.signature_url, work_dir
            )

            # Bounded waits; Ctrl-C must not block on a stalled download
            pending = {payload_future, signature_future}
            while pending:
                _, pending = wait(pending, timeout=WAIT_INTERVAL)
        except BaseException:
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        errors = []
        paths = []
        for future in (payload_future, signature_future):
            try:
                paths.append(future.result())
            except DownloadError as e:
                errors.append(e)

        if errors:
            for path in paths:
                Path(path).unlink(missing_ok=True)
            raise errors[0]

        logger.debug("Swift download complete")
        return FetchedArtifact(
            payload_path=Path(paths[0]),
            signature_path=Path(paths[1]),
            archive_name=location.archive_name,
        )


__all__ = [
    "ArtifactLocation",
    "FetchedArtifact",
    "ArtifactFetcher",
    "build_archive_name",
    "resolve_artifact",
    "DEFAULT_DOWNLOAD_HOST",
    "PLATFORM_FAMILY",
]
