"""
Host platform detection for SwiftKit.

This module answers two questions the installer asks about the machine it
runs on: which operating system it is (for the platform guard) and which
Linux distribution and release it is (to pick the matching Swift build).

Usage:
    from swiftkit.core.platform import detect_platform

    info = detect_platform()
    print(f"OS: {info.os}, distribution: {info.distribution} {info.distribution_version}")
"""

import functools
import platform
from dataclasses import dataclass

import distro


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows', or the raw system name)
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', or the raw machine)
        distribution: Linux distribution id ('ubuntu', 'debian', ...) or empty
        distribution_version: Distribution release ('20.04', ...) or empty
    """

    os: str
    arch: str
    distribution: str
    distribution_version: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64').

        Example:
            >>> PlatformInfo('linux', 'x64', 'ubuntu', '20.04').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        parts = [self.platform_string()]
        if self.distribution:
            parts.append(f"({self.distribution} {self.distribution_version})".strip())
        return " ".join(parts)


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    os_name = detect_os()
    if os_name == "linux":
        distribution = distro.id()
        distribution_version = distro.version()
    else:
        distribution = ""
        distribution_version = ""

    return PlatformInfo(
        os=os_name,
        arch=detect_architecture(),
        distribution=distribution,
        distribution_version=distribution_version,
    )


def detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'linux', 'macos', 'windows', or the lower-cased
        value of platform.system() for anything else
    """
    system = platform.system().lower()

    if system == "darwin":
        return "macos"
    return system


def detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing or when platform information changes.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "detect_os",
    "detect_architecture",
    "clear_platform_cache",
]
