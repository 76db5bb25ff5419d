"""
Centralized exception hierarchy for SwiftKit.

Every failure of the install pipeline is an InstallError subclass so the
installer can capture it in an InstallResult without guessing at types.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SwiftKitError(Exception):
    """Base exception for all SwiftKit errors."""

    pass


class ConfigError(SwiftKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Install Pipeline Exceptions
# ============================================================================


class InstallError(SwiftKitError):
    """Base exception for install pipeline failures."""

    pass


class WrongPlatformError(InstallError):
    """Raised when the installer runs on a host it does not target."""

    def __init__(self, host_os: str, expected_os: str = "linux"):
        self.host_os = host_os
        self.expected_os = expected_os
        super().__init__(
            f"Trying to run {expected_os} installer on non-{expected_os} os "
            f"(detected: {host_os})"
        )


class KeyProvisioningError(InstallError):
    """Raised when signing keys cannot be fetched, imported or refreshed."""

    pass


class DownloadError(InstallError):
    """Raised when a remote resource cannot be downloaded."""

    pass


class VerificationError(InstallError):
    """Raised when a detached signature does not verify."""

    pass


class ExtractionError(InstallError):
    """Raised when an archive cannot be extracted."""

    pass


class UnsupportedArchiveFormat(ExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class SystemDetectionError(InstallError):
    """Raised when the target system cannot be determined from the host."""

    pass


class CacheError(InstallError):
    """Raised when the tool cache cannot be read or written."""

    pass


class CacheLockTimeout(CacheError):
    """Raised when the cache lock cannot be acquired within timeout."""

    pass


class ProcessError(SwiftKitError):
    """Raised when an external process cannot be started."""

    pass


__all__ = [
    "SwiftKitError",
    "ConfigError",
    "InstallError",
    "WrongPlatformError",
    "KeyProvisioningError",
    "DownloadError",
    "VerificationError",
    "ExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "SystemDetectionError",
    "CacheError",
    "CacheLockTimeout",
    "ProcessError",
]
