"""
Persistent directory cache for installed toolchains.

Installations are keyed by (namespace, version, arch) and laid out as
``toolchains/<namespace>/<version>/<arch>/``. An entry only counts as present
once its ``<arch>.complete`` marker exists, and it is moved into place with a
single rename, so a reader never observes a half-populated installation.
Writers are serialized across processes with a file lock.

An index (registry.json) records metadata about every entry for listing and
housekeeping; the marker, not the index, is authoritative for lookups.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock, Timeout

from swiftkit.core.directory import get_global_cache_dir, get_toolchains_dir
from swiftkit.core.exceptions import CacheError, CacheLockTimeout
from swiftkit.core.filesystem import (
    FilesystemError,
    atomic_write,
    copy_tree,
    directory_size,
    safe_rmtree,
)
from swiftkit.core.interfaces import ToolCache
from swiftkit.core.platform import detect_architecture

logger = logging.getLogger(__name__)

COMPLETE_SUFFIX = ".complete"


def _entry_id(namespace: str, version: str, arch: str) -> str:
    return f"{namespace}/{version}/{arch}"


def _validate_key_part(name: str, value: str) -> None:
    if not value or not value.strip():
        raise CacheError(f"Cache {name} cannot be empty")
    if "/" in value or "\\" in value or value in (".", ".."):
        raise CacheError(f"Invalid cache {name}: {value!r}")


class DirectoryToolCache(ToolCache):
    """
    Tool cache stored in a directory tree.

    Example:
        >>> cache = DirectoryToolCache(Path.home() / ".swiftkit")
        >>> cache.find("swift-ubuntu", "5.9")
        >>> root = cache.put(Path("/tmp/x/swift-5.9-RELEASE-ubuntu20.04"), "swift-ubuntu", "5.9")
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        arch: Optional[str] = None,
        lock_timeout: int = 300,
    ):
        """
        Initialize the tool cache.

        Args:
            cache_dir: Cache root (default: global cache dir)
            arch: Architecture component of the key (default: host architecture)
            lock_timeout: Timeout in seconds for acquiring the cache lock
        """
        self.cache_dir = Path(cache_dir) if cache_dir else get_global_cache_dir()
        self.toolchains_dir = get_toolchains_dir(self.cache_dir)
        self.registry_path = self.cache_dir / "registry.json"
        self.lock_path = self.cache_dir / "lock" / "cache.lock"
        self.arch = arch or detect_architecture()
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.cache_dir}")

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def entry_path(self, namespace: str, version: str) -> Path:
        """Installation root for (namespace, version) whether or not it exists."""
        return self.toolchains_dir / namespace / version / self.arch

    def _marker_path(self, namespace: str, version: str) -> Path:
        entry = self.entry_path(namespace, version)
        return entry.with_name(entry.name + COMPLETE_SUFFIX)

    # ------------------------------------------------------------------
    # Locking and index
    # ------------------------------------------------------------------

    @contextmanager
    def _lock(self):
        """
        Acquire the exclusive cache lock.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                logger.debug("Acquired cache lock")
                yield
            logger.debug("Released cache lock")
        except Timeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock within {self.lock_timeout} seconds"
            ) from e

    def _load_registry(self) -> dict:
        if not self.registry_path.exists():
            return {"version": 1, "entries": {}}

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise CacheError(f"Failed to load cache registry: {e}") from e

        if not isinstance(data, dict) or "entries" not in data:
            logger.warning("Invalid cache registry format, resetting")
            return {"version": 1, "entries": {}}

        return data

    def _save_registry(self, data: dict) -> None:
        try:
            atomic_write(
                self.registry_path, json.dumps(data, indent=2, ensure_ascii=False)
            )
        except OSError as e:
            raise CacheError(f"Failed to save cache registry: {e}") from e

    # ------------------------------------------------------------------
    # ToolCache
    # ------------------------------------------------------------------

    def find(self, namespace: str, version: str) -> Optional[Path]:
        if not namespace or not version or not version.strip():
            return None

        try:
            _validate_key_part("namespace", namespace)
            _validate_key_part("version", version)
        except CacheError:
            logger.debug(f"Ignoring invalid cache key: {namespace!r} {version!r}")
            return None

        entry = self.entry_path(namespace, version)
        if entry.is_dir() and self._marker_path(namespace, version).exists():
            logger.debug(f"Found in cache: {namespace} {version} {self.arch}")
            return entry

        logger.debug(f"Not found in cache: {namespace} {version} {self.arch}")
        return None

    def put(
        self, source_dir: Path, namespace: str, version: str, replace: bool = False
    ) -> Path:
        _validate_key_part("namespace", namespace)
        _validate_key_part("version", version)

        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise CacheError(f"Source directory does not exist: {source_dir}")

        entry = self.entry_path(namespace, version)
        marker = self._marker_path(namespace, version)
        staging = entry.with_name(f".{entry.name}.{uuid.uuid4().hex}.tmp")

        with self._lock():
            if not replace and entry.is_dir() and marker.exists():
                logger.info(f"Keeping existing cache entry {namespace} {version}")
                return entry

            try:
                entry.parent.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Copying {source_dir} into cache")
                copy_tree(source_dir, staging)

                # Drop the marker before touching an existing entry
                marker.unlink(missing_ok=True)
                if entry.exists():
                    safe_rmtree(entry, require_prefix=self.toolchains_dir)

                staging.rename(entry)
                marker.touch()
            except (OSError, FilesystemError) as e:
                if staging.exists():
                    safe_rmtree(staging, require_prefix=self.toolchains_dir)
                raise CacheError(
                    f"Failed to cache {namespace} {version}: {e}"
                ) from e

            # Index errors are non-fatal once the entry is committed
            try:
                self._record_entry(namespace, version, entry)
            except (OSError, CacheError) as e:
                logger.warning(
                    f"Could not update cache index for {namespace} {version}: {e}"
                )

        logger.info(f"Cached {namespace} {version} at {entry}")
        return entry

    def _record_entry(self, namespace: str, version: str, entry: Path) -> None:
        data = self._load_registry()
        data["entries"][_entry_id(namespace, version, self.arch)] = {
            "namespace": namespace,
            "version": version,
            "arch": self.arch,
            "path": str(entry.resolve()),
            "size_mb": directory_size(entry) / (1024 * 1024),
            "installed": datetime.now().isoformat(),
        }
        self._save_registry(data)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def list_versions(self, namespace: str) -> List[str]:
        """
        Versions with a complete entry for the current architecture.

        Example:
            >>> cache.list_versions("swift-ubuntu")
            ['5.8', '5.9']
        """
        namespace_dir = self.toolchains_dir / namespace
        if not namespace_dir.is_dir():
            return []

        return sorted(
            version_dir.name
            for version_dir in namespace_dir.iterdir()
            if version_dir.is_dir() and self.find(namespace, version_dir.name)
        )

    def get_entry_info(self, namespace: str, version: str) -> Optional[Dict]:
        """Index metadata recorded for an entry, or None."""
        data = self._load_registry()
        return data["entries"].get(_entry_id(namespace, version, self.arch))

    def remove(self, namespace: str, version: str) -> bool:
        """
        Remove a cached installation.

        Returns:
            True if an entry was removed, False if none existed
        """
        _validate_key_part("namespace", namespace)
        _validate_key_part("version", version)

        entry = self.entry_path(namespace, version)
        marker = self._marker_path(namespace, version)

        with self._lock():
            existed = marker.exists() or entry.exists()
            try:
                marker.unlink(missing_ok=True)
                safe_rmtree(entry, require_prefix=self.toolchains_dir)
            except (OSError, FilesystemError) as e:
                raise CacheError(f"Failed to remove {namespace} {version}: {e}") from e

            data = self._load_registry()
            if data["entries"].pop(_entry_id(namespace, version, self.arch), None):
                self._save_registry(data)

        if existed:
            logger.info(f"Removed {namespace} {version} from cache")
        else:
            logger.warning(f"Not in cache: {namespace} {version}")
        return existed


__all__ = ["DirectoryToolCache", "COMPLETE_SUFFIX"]
