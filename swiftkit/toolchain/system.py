"""
Target system description.

A SystemDescriptor names the platform family a Swift build is made for and
the release of that family, e.g. ``SystemDescriptor("ubuntu", "20.04")``. The
name keys the cache namespace; the version selects the download.
"""

from dataclasses import dataclass
from typing import Optional

from swiftkit.core.exceptions import SystemDetectionError
from swiftkit.core.platform import PlatformInfo, detect_platform

CACHE_NAMESPACE_PREFIX = "swift"


def cache_namespace(system_name: str) -> str:
    """Cache namespace for installations on the named system."""
    return f"{CACHE_NAMESPACE_PREFIX}-{system_name}"


@dataclass(frozen=True)
class SystemDescriptor:
    """
    Platform a toolchain is installed for.

    A blank name or version is filled from the host by the installer.

    Attributes:
        name: Platform identifier, used as the cache namespace component
        version: Release of the platform (e.g., '20.04')
    """

    name: str
    version: str

    @property
    def cache_namespace(self) -> str:
        """
        Cache namespace for installations on this system.

        Example:
            >>> SystemDescriptor("ubuntu", "20.04").cache_namespace
            'swift-ubuntu'
        """
        return cache_namespace(self.name)

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


def detect_system(info: Optional[PlatformInfo] = None) -> SystemDescriptor:
    """
    Describe the host as a SystemDescriptor.

    Args:
        info: Platform information (default: detect the current host)

    Returns:
        Descriptor built from the Linux distribution id and release

    Raises:
        SystemDetectionError: If the distribution or its release cannot be determined
    """
    if info is None:
        info = detect_platform()

    if not info.distribution or not info.distribution_version:
        raise SystemDetectionError(
            f"Cannot determine Linux distribution on {info.platform_string()}; "
            "pass the system name and version explicitly"
        )

    return SystemDescriptor(name=info.distribution, version=info.distribution_version)


__all__ = [
    "SystemDescriptor",
    "detect_system",
    "cache_namespace",
    "CACHE_NAMESPACE_PREFIX",
]
