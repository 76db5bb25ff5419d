"""
Swift toolchain installer.

This module ties the pipeline together as a small state machine:

    CHECKING_CACHE -> CACHED -> PATH_EXPOSED                      (cache hit)
    CHECKING_CACHE -> PROVISIONING -> FETCHING -> VERIFYING
                   -> EXTRACTING -> CACHED -> PATH_EXPOSED        (cache miss)

Any failure moves to FAILED. Keys are provisioned before the downloads start
and the signature is checked only after both downloads finished, so
verification always runs against freshly provisioned keys. Nothing is written
to the cache unless verification and extraction succeeded.

install() never raises InstallError; it returns an InstallResult and callers
check ``result.ok`` or call ``result.raise_for_error()``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from swiftkit.config.settings import InstallerSettings
from swiftkit.core.directory import get_work_dir
from swiftkit.core.download import HttpDownloader, log_progress
from swiftkit.core.environment import EnvironmentPathRegistry
from swiftkit.core.exceptions import (
    ExtractionError,
    InstallError,
    WrongPlatformError,
)
from swiftkit.core.filesystem import TarExtractor, temporary_directory
from swiftkit.core.interfaces import ArchiveExtractor, PathRegistry, ToolCache
from swiftkit.core.platform import detect_os
from swiftkit.core.process import SubprocessRunner
from swiftkit.core.tool_cache import DirectoryToolCache
from swiftkit.toolchain.fetcher import ArtifactFetcher, FetchedArtifact
from swiftkit.toolchain.keys import GpgKeyStore, KeyProvisioner
from swiftkit.toolchain.system import SystemDescriptor, detect_system
from swiftkit.toolchain.verifier import SignatureVerifier

logger = logging.getLogger(__name__)

TARGET_OS = "linux"


class InstallState(Enum):
    """Stages of an install attempt."""

    CHECKING_CACHE = "checking_cache"
    CACHED = "cached"
    PROVISIONING = "provisioning"
    FETCHING = "fetching"
    VERIFYING = "verifying"
    EXTRACTING = "extracting"
    PATH_EXPOSED = "path_exposed"
    FAILED = "failed"


@dataclass
class InstallResult:
    """Outcome of an install attempt."""

    version: str
    """Requested Swift version"""

    system: Optional[SystemDescriptor] = None
    """System the toolchain was installed for"""

    state: InstallState = InstallState.CHECKING_CACHE
    """Last state reached"""

    installation_root: Optional[Path] = None
    """Root of the cached installation"""

    bin_path: Optional[Path] = None
    """Directory added to the executable search path"""

    was_cached: bool = False
    """Whether the installation came from the cache"""

    error: Optional[InstallError] = None
    """Failure that stopped the attempt"""

    history: List[InstallState] = field(default_factory=list)
    """Every state entered, in order"""

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the captured error, if any."""
        if self.error is not None:
            raise self.error


class SwiftInstaller:
    """
    Installs Swift toolchains into a local cache and exposes them on PATH.

    Example:
        >>> installer = SwiftInstaller.from_settings(load_settings())
        >>> result = installer.install("5.9", SystemDescriptor("ubuntu", "20.04"))
        >>> result.raise_for_error()
        >>> print(result.bin_path)
    """

    def __init__(
        self,
        key_provisioner: KeyProvisioner,
        fetcher: ArtifactFetcher,
        verifier: SignatureVerifier,
        extractor: ArchiveExtractor,
        tool_cache: ToolCache,
        path_registry: PathRegistry,
        work_root: Optional[Path] = None,
        os_detector: Callable[[], str] = detect_os,
        system_detector: Callable[[], SystemDescriptor] = detect_system,
    ):
        """
        Args:
            key_provisioner: Provisions signing keys
            fetcher: Downloads release archive and signature
            verifier: Checks the signature
            extractor: Unpacks the archive
            tool_cache: Stores verified installations
            path_registry: Receives the toolchain's bin directory
            work_root: Parent of per-attempt work directories (default: system temp)
            os_detector: Returns the host OS name
            system_detector: Describes the host when the system is missing or partial
        """
        self.key_provisioner = key_provisioner
        self.fetcher = fetcher
        self.verifier = verifier
        self.extractor = extractor
        self.tool_cache = tool_cache
        self.path_registry = path_registry
        self.work_root = work_root
        self.os_detector = os_detector
        self.system_detector = system_detector

    @classmethod
    def from_settings(cls, settings: InstallerSettings) -> "SwiftInstaller":
        """Build an installer with the default collaborators."""
        downloader = HttpDownloader(
            timeout=settings.download_timeout, progress_callback=log_progress
        )
        key_store = GpgKeyStore(SubprocessRunner(), settings.gpg_executable)

        return cls(
            key_provisioner=KeyProvisioner(
                downloader,
                key_store,
                keys_url=settings.keys_url,
                keyserver=settings.keyserver,
                publisher=settings.key_publisher,
            ),
            fetcher=ArtifactFetcher(downloader, host=settings.download_host),
            verifier=SignatureVerifier(key_store),
            extractor=TarExtractor(),
            tool_cache=DirectoryToolCache(
                settings.cache_dir, lock_timeout=settings.lock_timeout
            ),
            path_registry=EnvironmentPathRegistry(),
            work_root=get_work_dir(settings.cache_dir),
        )

    def install(
        self,
        version: str,
        system: Optional[SystemDescriptor] = None,
        force: bool = False,
    ) -> InstallResult:
        """
        Ensure a verified toolchain is cached and on PATH.

        Args:
            version: Swift version (e.g., '5.9')
            system: Target system; missing or blank parts are detected from the host
            force: Reinstall even if a cached installation exists

        Returns:
            InstallResult; ``result.ok`` is False when the attempt failed
        """
        result = InstallResult(version=version, system=system)

        host_os = self.os_detector()
        if host_os != TARGET_OS:
            return self._fail(result, WrongPlatformError(host_os, TARGET_OS))

        try:
            result.system = self._resolve_system(result.system)
            namespace = result.system.cache_namespace

            root = None
            if force:
                logger.debug("Forced reinstall, skipping cache lookup")
            else:
                self._transition(result, InstallState.CHECKING_CACHE)
                root = self._find_cached(namespace, version)

            if root is not None:
                logger.debug("Matching installation found")
                result.was_cached = True
                self._transition(result, InstallState.CACHED)
            else:
                logger.debug("No matching installation found")
                root = self._install_from_remote(result, namespace, replace=force)

        except InstallError as e:
            return self._fail(result, e)

        result.installation_root = root
        self._transition(result, InstallState.PATH_EXPOSED)

        logger.debug("Adding swift to path")
        result.bin_path = root / "usr" / "bin"
        self.path_registry.add_path(result.bin_path)

        logger.info(f"Swift {version} installed at {root}")
        return result

    def _resolve_system(self, system: Optional[SystemDescriptor]) -> SystemDescriptor:
        """Fill blank parts of the target system from the host."""
        if system is not None and system.name and system.version:
            return system

        detected = self.system_detector()
        if system is None:
            return detected
        return SystemDescriptor(
            name=system.name or detected.name,
            version=system.version or detected.version,
        )

    def _find_cached(self, namespace: str, version: str) -> Optional[Path]:
        """Cache lookup where blank values count as absent."""
        cached = self.tool_cache.find(namespace, version)
        if cached is None or not str(cached).strip():
            return None
        return Path(cached)

    def _install_from_remote(
        self, result: InstallResult, namespace: str, replace: bool = False
    ) -> Path:
        """Provision keys, fetch, verify and cache; returns the installation root."""
        version = result.version
        system = result.system

        with temporary_directory(prefix="swiftkit_", parent=self.work_root) as work_dir:
            self._transition(result, InstallState.PROVISIONING)
            self.key_provisioner.provision_keys(work_dir)

            self._transition(result, InstallState.FETCHING)
            artifact = self.fetcher.fetch(version, system.version, work_dir)

            self._transition(result, InstallState.VERIFYING)
            self.verifier.verify(artifact.signature_path, artifact.payload_path)

            self._transition(result, InstallState.EXTRACTING)
            root = self._unpack(artifact, work_dir, namespace, version, replace)

        self._transition(result, InstallState.CACHED)
        return root

    def _unpack(
        self,
        artifact: FetchedArtifact,
        work_dir: Path,
        namespace: str,
        version: str,
        replace: bool = False,
    ) -> Path:
        logger.debug("Extracting package")
        extract_dir = self.extractor.extract(artifact.payload_path, work_dir / "extract")
        logger.debug("Package extracted")

        source = Path(extract_dir) / artifact.archive_name
        if not source.is_dir():
            raise ExtractionError(
                f"Archive did not contain the expected directory "
                f"'{artifact.archive_name}'"
            )

        cached_path = self.tool_cache.put(source, namespace, version, replace=replace)
        logger.debug("Package cached")
        return Path(cached_path)

    def _transition(self, result: InstallResult, state: InstallState) -> None:
        logger.debug(f"Install state: {result.state.value} -> {state.value}")
        result.state = state
        result.history.append(state)

    def _fail(self, result: InstallResult, error: InstallError) -> InstallResult:
        if isinstance(error, WrongPlatformError):
            logger.error(str(error))
        else:
            logger.error(
                f"Failed to install swift {result.version} "
                f"(while {result.state.value}): {error}"
            )
        result.error = error
        self._transition(result, InstallState.FAILED)
        return result


def install(
    version: str,
    system: Optional[SystemDescriptor] = None,
    settings: Optional[InstallerSettings] = None,
    force: bool = False,
) -> InstallResult:
    """
    Convenience function to install a Swift toolchain with default collaborators.

    Example:
        >>> from swiftkit.toolchain.installer import install
        >>> result = install("5.9")
        >>> if not result.ok:
        ...     print(result.error)
    """
    installer = SwiftInstaller.from_settings(settings or InstallerSettings())
    return installer.install(version, system, force=force)


__all__ = [
    "InstallState",
    "InstallResult",
    "SwiftInstaller",
    "install",
    "TARGET_OS",
]
