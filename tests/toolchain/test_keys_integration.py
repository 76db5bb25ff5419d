"""
Integration tests for key provisioning against the real key URL and gpg.

Run with ``pytest --integration``; requires network access and gpg on PATH.
"""

import shutil

import pytest

from swiftkit.core.download import HttpDownloader
from swiftkit.core.exceptions import VerificationError
from swiftkit.core.process import SubprocessRunner
from swiftkit.toolchain.keys import GpgKeyStore, KeyProvisioner

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("gpg") is None, reason="gpg not installed"),
]


@pytest.fixture
def private_keyring(temp_dir, monkeypatch):
    """Point gpg at a throwaway home so the user's keyring is untouched."""
    gnupg_home = temp_dir / "gnupg"
    gnupg_home.mkdir(mode=0o700)
    monkeypatch.setenv("GNUPGHOME", str(gnupg_home))
    return gnupg_home


@pytest.fixture
def key_store():
    return GpgKeyStore(SubprocessRunner(timeout=120))


class TestRealKeyProvisioning:
    """Provision the published Swift keys into a private keyring."""

    def test_provision_keys(self, temp_dir, private_keyring, key_store):
        work_dir = temp_dir / "work"
        work_dir.mkdir()

        KeyProvisioner(HttpDownloader(timeout=60), key_store).provision_keys(work_dir)

        assert any(private_keyring.iterdir())

    def test_unsigned_file_fails_verification(self, temp_dir, private_keyring, key_store):
        payload = temp_dir / "payload"
        signature = temp_dir / "payload.sig"
        payload.write_bytes(b"not a toolchain")
        signature.write_bytes(b"not a signature")

        with pytest.raises(VerificationError):
            key_store.verify_detached(signature, payload)
