"""
Core interfaces for SwiftKit.

This module defines the abstract capabilities the install pipeline depends on.
Default implementations live next to it in the core package; tests substitute
fakes that record calls instead of touching the network, the keyring or the
filesystem.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence


class Downloader(ABC):
    """Fetches a remote resource into local storage."""

    @abstractmethod
    def download(self, url: str, directory: Path) -> Path:
        """
        Download a URL into a directory.

        Args:
            url: Remote resource to fetch
            directory: Directory that receives the file

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the resource cannot be fetched completely
        """
        pass


class ArchiveExtractor(ABC):
    """Decompresses an archive into a directory."""

    @abstractmethod
    def extract(self, archive_path: Path, destination: Path) -> Path:
        """
        Extract an archive.

        Args:
            archive_path: Archive file to extract
            destination: Directory to extract into

        Returns:
            Directory containing the extracted tree

        Raises:
            ExtractionError: If extraction fails
        """
        pass


class ToolCache(ABC):
    """Keyed persistent directory cache."""

    @abstractmethod
    def find(self, namespace: str, version: str) -> Optional[Path]:
        """
        Look up a cached installation.

        Args:
            namespace: Cache namespace (e.g., "swift-ubuntu")
            version: Version string, matched exactly

        Returns:
            Installation root, or None when nothing is cached
        """
        pass

    @abstractmethod
    def put(
        self, source_dir: Path, namespace: str, version: str, replace: bool = False
    ) -> Path:
        """
        Record a directory as the installation for (namespace, version).

        Either a complete entry is recorded or nothing is.
        An existing complete entry is kept unless replace is True.

        Args:
            source_dir: Directory to copy into the cache
            namespace: Cache namespace
            version: Version string
            replace: Overwrite an existing complete entry

        Returns:
            Installation root inside the cache

        Raises:
            CacheError: If the entry cannot be written
        """
        pass


class ProcessRunner(ABC):
    """Runs an external command and reports its exit status."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> int:
        """
        Run a command.

        Args:
            args: Command and arguments

        Returns:
            Process exit status

        Raises:
            ProcessError: If the command cannot be started
        """
        pass


class PathRegistry(ABC):
    """Appends directories to the executable search path of the session."""

    @abstractmethod
    def add_path(self, directory: Path) -> None:
        """Make executables in directory visible to subsequent steps."""
        pass


class KeyStore(ABC):
    """
    OpenPGP trust store used to verify distribution signatures.

    Modelled as an injected capability rather than the host keyring directly,
    so the provisioning and verification steps can be tested without gpg.
    """

    @abstractmethod
    def import_keys(self, keys_file: Path) -> None:
        """
        Import public keys from a file.

        Raises:
            KeyProvisioningError: If the import fails
        """
        pass

    @abstractmethod
    def refresh_keys(self, keyserver: str, publisher: str) -> None:
        """
        Refresh keys matching publisher from a key server.

        Raises:
            KeyProvisioningError: If the refresh fails
        """
        pass

    @abstractmethod
    def verify_detached(self, signature_path: Path, payload_path: Path) -> None:
        """
        Check a detached signature against its payload.

        Raises:
            VerificationError: If the signature does not verify
        """
        pass


__all__ = [
    "Downloader",
    "ArchiveExtractor",
    "ToolCache",
    "ProcessRunner",
    "PathRegistry",
    "KeyStore",
]
