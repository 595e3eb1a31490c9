"""Mnemonic-backed signing account."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field

from nacl.signing import SigningKey

from . import crypto_utils
from .errors import SignerError


@dataclass(frozen=True)
class Signer:
    """An Ed25519 Sui account: its address and the key that signs for it."""

    address: str
    private_key: SigningKey = field(repr=False)

    @classmethod
    def from_mnemonic(
        cls, mnemonic: str, path: str = crypto_utils.SUI_DERIVATION_PATH
    ) -> "Signer":
        """Derive the account at *path* from a BIP-39 *mnemonic*."""

        if not mnemonic or not mnemonic.strip():
            raise SignerError("mnemonic is empty")
        try:
            seed = crypto_utils.seed_from_mnemonic(" ".join(mnemonic.split()))
            key_seed = crypto_utils.derive_ed25519_key(seed, path)
        # pybip39 raises its own error types for unknown words and bad checksums
        except Exception as exc:
            raise SignerError(f"invalid mnemonic: {exc}") from exc

        private_key = SigningKey(key_seed)
        return cls(
            address=crypto_utils.public_key_to_address(_public_key_bytes(private_key)),
            private_key=private_key,
        )

    @property
    def public_key(self) -> bytes:
        return _public_key_bytes(self.private_key)

    def sign_transaction(self, tx_bytes_b64: str) -> str:
        """Sign base64 transaction bytes and return the serialized signature."""

        try:
            tx_bytes = base64.b64decode(tx_bytes_b64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SignerError("transaction bytes are not valid base64") from exc

        digest = crypto_utils.transaction_digest(tx_bytes)
        signature = self.private_key.sign(digest).signature
        return crypto_utils.serialize_signature(signature, self.public_key)


def _public_key_bytes(private_key: SigningKey) -> bytes:
    return bytes(private_key.verify_key)


__all__ = ["Signer"]
