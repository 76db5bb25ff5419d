"""
Core functionality for SwiftKit.

This package contains the capability interfaces and their default
implementations that the install pipeline is built from.
"""

from .exceptions import (
    SwiftKitError,
    ConfigError,
    InstallError,
    WrongPlatformError,
    SystemDetectionError,
    KeyProvisioningError,
    DownloadError,
    VerificationError,
    ExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    CacheError,
    CacheLockTimeout,
    ProcessError,
)

from .interfaces import (
    Downloader,
    ArchiveExtractor,
    ToolCache,
    ProcessRunner,
    PathRegistry,
    KeyStore,
)

from .directory import get_global_cache_dir

from .download import HttpDownloader, download_file
from .environment import EnvironmentPathRegistry
from .filesystem import TarExtractor, extract_archive
from .platform import PlatformInfo, detect_platform, detect_os
from .process import SubprocessRunner
from .tool_cache import DirectoryToolCache

__all__ = [
    "SwiftKitError",
    "ConfigError",
    "InstallError",
    "WrongPlatformError",
    "SystemDetectionError",
    "KeyProvisioningError",
    "DownloadError",
    "VerificationError",
    "ExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "CacheError",
    "CacheLockTimeout",
    "ProcessError",
    "Downloader",
    "ArchiveExtractor",
    "ToolCache",
    "ProcessRunner",
    "PathRegistry",
    "KeyStore",
    "get_global_cache_dir",
    "HttpDownloader",
    "download_file",
    "EnvironmentPathRegistry",
    "TarExtractor",
    "extract_archive",
    "PlatformInfo",
    "detect_platform",
    "detect_os",
    "SubprocessRunner",
    "DirectoryToolCache",
]
