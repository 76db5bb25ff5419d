"""
File system utilities for SwiftKit.

This module provides the filesystem operations the install pipeline needs:
- Tar archive extraction (tar.gz) with directory traversal protection
- Safe file operations (atomic writes, safe deletion, tree copies)
- Temporary work directories with automatic cleanup
"""

import logging
import shutil
import sys
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from swiftkit.core.exceptions import (
    ExtractionError,
    InsecureArchiveError,
    SwiftKitError,
    UnsupportedArchiveFormat,
)
from swiftkit.core.interfaces import ArchiveExtractor

logger = logging.getLogger(__name__)


class FilesystemError(SwiftKitError):
    """A cache or work directory operation failed."""


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Whether path lies under parent.

    Example:
        >>> is_relative_to(Path("/tmp/x/swift-5.9-RELEASE-ubuntu20.04/usr"), Path("/tmp/x"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Reject archive members that would land outside the destination.

    Raises:
        InsecureArchiveError: If the member resolves outside destination
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Refusing to extract '{path}': it resolves outside {destination}"
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
) -> None:
    """
    Extract a tar archive to a destination directory.

    The format is detected from the file contents, not the name, because
    downloaded files carry generated names. Only tar-family archives are
    supported.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If the file is not a tar archive
        ExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('swift-5.9-RELEASE-ubuntu20.04.tar.gz', '/tmp/swift')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")

    if not tarfile.is_tarfile(archive_path):
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_path.name}. Supported: .tar.gz"
        )

    destination.mkdir(parents=True, exist_ok=True)

    try:
        _extract_tar(archive_path, destination)
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_tar(archive_path: Path, destination: Path) -> None:
    """Extract a tar archive, compression detected transparently."""
    with tarfile.open(archive_path, "r:*") as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Toolchain archives carry symlinks inside usr/, which the "data"
        # filter allows as long as they stay within the destination.
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


class TarExtractor(ArchiveExtractor):
    """ArchiveExtractor backed by the tarfile module."""

    def extract(self, archive_path: Path, destination: Path) -> Path:
        logger.debug(f"Extracting {archive_path} to {destination}")
        extract_archive(archive_path, destination)
        return Path(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Replace a file so readers see either the old or the new content.

    The content goes to a sibling temp file that is then renamed over the
    target; on failure the target is left as it was.

    Example:
        >>> atomic_write('registry.json', '{"version": 1}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, optionally confined to a prefix.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree(cache_dir / "toolchains" / "swift-ubuntu" / "5.9", require_prefix=cache_dir)
        >>> safe_rmtree("/usr/bin", require_prefix=cache_dir)  # ValueError
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Copy a directory tree, preserving symlinks and metadata.

    Args:
        source: Source directory
        destination: Destination directory (must not exist)

    Raises:
        FilesystemError: If source is missing or the copy fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    try:
        shutil.copytree(source, destination, symlinks=True)
    except (OSError, shutil.Error) as e:
        raise FilesystemError(f"Failed to copy '{source}' to '{destination}': {e}") from e


def directory_size(path: Union[str, Path]) -> int:
    """Total size in bytes of the regular files below path, symlinks skipped."""
    path = Path(path)
    total_size = 0

    for item in path.rglob("*"):
        if item.is_file() and not item.is_symlink():
            total_size += item.stat().st_size

    return total_size


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_directory(
    prefix: str = "swiftkit_",
    parent: Optional[Path] = None,
    cleanup: bool = True,
):
    """
    Context manager for temporary directory with automatic cleanup.

    Args:
        prefix: Prefix for temp directory name
        parent: Directory to create it in (default: system temp dir)
        cleanup: If True, remove directory on exit

    Yields:
        Path to temporary directory

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    if parent is not None:
        Path(parent).mkdir(parents=True, exist_ok=True)
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))

    try:
        yield temp_dir
    finally:
        if cleanup and temp_dir.exists():
            try:
                safe_rmtree(temp_dir)
            except FilesystemError as e:
                logger.warning(f"Failed to remove temporary directory: {e}")


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "extract_archive",
    "TarExtractor",
    "atomic_write",
    "safe_rmtree",
    "copy_tree",
    "directory_size",
    "temporary_directory",
]
