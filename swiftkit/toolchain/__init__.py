"""
Swift toolchain installation for SwiftKit.

This module provides functionality for:
- Signing key provisioning
- Release URL resolution and download
- Detached signature verification
- The install state machine tying them to the tool cache
"""

from swiftkit.toolchain.system import SystemDescriptor, detect_system
from swiftkit.toolchain.keys import GpgKeyStore, KeyProvisioner
from swiftkit.toolchain.fetcher import (
    ArtifactFetcher,
    ArtifactLocation,
    FetchedArtifact,
    build_archive_name,
    resolve_artifact,
)
from swiftkit.toolchain.verifier import SignatureVerifier
from swiftkit.toolchain.installer import (
    InstallResult,
    InstallState,
    SwiftInstaller,
    install,
)

__all__ = [
    "SystemDescriptor",
    "detect_system",
    "GpgKeyStore",
    "KeyProvisioner",
    "ArtifactFetcher",
    "ArtifactLocation",
    "FetchedArtifact",
    "build_archive_name",
    "resolve_artifact",
    "SignatureVerifier",
    "InstallResult",
    "InstallState",
    "SwiftInstaller",
    "install",
]
