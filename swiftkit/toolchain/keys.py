"""
Signing key provisioning.

Swift releases are signed with keys published at a well-known URL. Before a
freshly downloaded toolchain can be verified, those keys are imported into the
local trust store and refreshed from a key server so revocations and expiry
updates are seen.

Provisioning is not cached: it runs on every install that misses the cache,
which costs a download and a key server round trip each time.
"""

import logging
from pathlib import Path

from swiftkit.core.defaults import (
    DEFAULT_KEY_PUBLISHER,
    DEFAULT_KEYS_URL,
    DEFAULT_KEYSERVER,
)
from swiftkit.core.exceptions import (
    DownloadError,
    KeyProvisioningError,
    ProcessError,
    VerificationError,
)
from swiftkit.core.interfaces import Downloader, KeyStore, ProcessRunner

logger = logging.getLogger(__name__)


class GpgKeyStore(KeyStore):
    """
    KeyStore backed by the gpg command line tool.

    Operates on the invoking user's default keyring; the keyring belongs to
    the host, not to this process, and is never torn down.
    """

    def __init__(self, runner: ProcessRunner, gpg_executable: str = "gpg"):
        self.runner = runner
        self.gpg = gpg_executable

    def import_keys(self, keys_file: Path) -> None:
        try:
            status = self.runner.run([self.gpg, "--import", str(keys_file)])
        except ProcessError as e:
            raise KeyProvisioningError(f"Failed to import keys: {e}") from e

        if status != 0:
            raise KeyProvisioningError(
                f"gpg --import exited with status {status}"
            )

    def refresh_keys(self, keyserver: str, publisher: str) -> None:
        try:
            status = self.runner.run(
                [self.gpg, "--keyserver", keyserver, "--refresh-keys", publisher]
            )
        except ProcessError as e:
            raise KeyProvisioningError(f"Failed to refresh keys: {e}") from e

        if status != 0:
            raise KeyProvisioningError(
                f"gpg --refresh-keys {publisher} against {keyserver} "
                f"exited with status {status}"
            )

    def verify_detached(self, signature_path: Path, payload_path: Path) -> None:
        try:
            status = self.runner.run(
                [self.gpg, "--verify", str(signature_path), str(payload_path)]
            )
        except ProcessError as e:
            raise VerificationError(f"Failed to run signature check: {e}") from e

        if status != 0:
            raise VerificationError(
                f"Signature check failed for {payload_path.name} (gpg status {status})"
            )


class KeyProvisioner:
    """
    Populates the trust store with the publisher's signing keys.

    Example:
        >>> provisioner = KeyProvisioner(HttpDownloader(), GpgKeyStore(SubprocessRunner()))
        >>> provisioner.provision_keys(work_dir)
    """

    def __init__(
        self,
        downloader: Downloader,
        key_store: KeyStore,
        keys_url: str = DEFAULT_KEYS_URL,
        keyserver: str = DEFAULT_KEYSERVER,
        publisher: str = DEFAULT_KEY_PUBLISHER,
    ):
        self.downloader = downloader
        self.key_store = key_store
        self.keys_url = keys_url
        self.keyserver = keyserver
        self.publisher = publisher

    def provision_keys(self, work_dir: Path) -> None:
        """
        Fetch, import and refresh the signing keys.

        Args:
            work_dir: Directory for the downloaded keys document

        Raises:
            KeyProvisioningError: If any step fails
        """
        logger.debug("Fetching verification keys")
        try:
            keys_file = self.downloader.download(self.keys_url, work_dir)
        except DownloadError as e:
            raise KeyProvisioningError(
                f"Failed to download signing keys from {self.keys_url}: {e}"
            ) from e

        logger.debug("Importing verification keys")
        self.key_store.import_keys(keys_file)

        logger.debug("Refreshing keys")
        self.key_store.refresh_keys(self.keyserver, self.publisher)


__all__ = [
    "GpgKeyStore",
    "KeyProvisioner",
    "DEFAULT_KEYS_URL",
    "DEFAULT_KEYSERVER",
    "DEFAULT_KEY_PUBLISHER",
]
