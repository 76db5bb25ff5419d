"""
Directory layout for SwiftKit.

Directory Structure:
    Global Cache (~/.swiftkit/, or $SWIFTKIT_CACHE_DIR):
        - toolchains/     : Verified, extracted toolchain installations
          - <namespace>/<version>/<arch>/   : installation root
          - <namespace>/<version>/<arch>.complete : completion marker
        - lock/           : Cache lock files
        - tmp/            : Per-install work directories
        - registry.json   : Index of cached installations
"""

import os
from pathlib import Path

CACHE_DIR_ENV = "SWIFTKIT_CACHE_DIR"


def get_global_cache_dir() -> Path:
    """
    Get the global cache directory path.

    Returns:
        $SWIFTKIT_CACHE_DIR when set, otherwise ~/.swiftkit

    Example:
        >>> get_global_cache_dir()
        PosixPath('/home/user/.swiftkit')
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".swiftkit"


def get_toolchains_dir(cache_dir: Path) -> Path:
    """Directory holding cached installations under a cache root."""
    return Path(cache_dir) / "toolchains"


def get_work_dir(cache_dir: Path) -> Path:
    """Directory holding per-install temporary work directories."""
    return Path(cache_dir) / "tmp"


__all__ = [
    "CACHE_DIR_ENV",
    "get_global_cache_dir",
    "get_toolchains_dir",
    "get_work_dir",
]
