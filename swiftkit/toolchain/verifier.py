"""
Detached signature verification for downloaded releases.
"""

import logging
from pathlib import Path

from swiftkit.core.exceptions import VerificationError
from swiftkit.core.interfaces import KeyStore

logger = logging.getLogger(__name__)


class SignatureVerifier:
    """
    Checks a release archive against its detached signature.

    Fails closed: anything short of a successful check raises. The key store
    must have been provisioned in the same install attempt.
    """

    def __init__(self, key_store: KeyStore):
        self.key_store = key_store

    def verify(self, signature_path: Path, payload_path: Path) -> None:
        """
        Verify payload_path against signature_path.

        Raises:
            VerificationError: If either file is missing or the check fails
        """
        logger.debug("Verifying signature")

        if not Path(payload_path).is_file():
            raise VerificationError(f"Payload not found: {payload_path}")
        if not Path(signature_path).is_file():
            raise VerificationError(f"Signature file not found: {signature_path}")

        self.key_store.verify_detached(Path(signature_path), Path(payload_path))
        logger.debug("Signature verified")


__all__ = ["SignatureVerifier"]
