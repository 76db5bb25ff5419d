"""
Tests for detached signature verification.
"""

import pytest

from swiftkit.core.exceptions import VerificationError
from swiftkit.toolchain.verifier import SignatureVerifier
from tests.mocks import FakeKeyStore


@pytest.fixture
def artifact_files(tmp_path):
    payload = tmp_path / "swift.tar.gz"
    signature = tmp_path / "swift.tar.gz.sig"
    payload.write_bytes(b"payload")
    signature.write_bytes(b"signature")
    return signature, payload


class TestSignatureVerifier:
    """Test SignatureVerifier."""

    def test_delegates_to_key_store(self, artifact_files):
        signature, payload = artifact_files
        key_store = FakeKeyStore()

        SignatureVerifier(key_store).verify(signature, payload)

        assert key_store.calls == [("verify", signature, payload)]

    def test_bad_signature(self, artifact_files):
        signature, payload = artifact_files

        with pytest.raises(VerificationError):
            SignatureVerifier(FakeKeyStore(fail_verify=True)).verify(signature, payload)

    def test_missing_signature(self, artifact_files):
        """A missing file fails without consulting the key store."""
        signature, payload = artifact_files
        signature.unlink()
        key_store = FakeKeyStore()

        with pytest.raises(VerificationError, match="Signature file not found"):
            SignatureVerifier(key_store).verify(signature, payload)

        assert key_store.calls == []

    def test_missing_payload(self, artifact_files):
        signature, payload = artifact_files
        payload.unlink()

        with pytest.raises(VerificationError, match="Payload not found"):
            SignatureVerifier(FakeKeyStore()).verify(signature, payload)
