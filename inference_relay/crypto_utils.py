"""Key derivation and hashing primitives for Sui Ed25519 accounts.

Sui derives Ed25519 keys from a BIP-39 seed with SLIP-0010 along
``m/44'/784'/0'/0'/0'``. Addresses and signing digests are BLAKE2b-256 over
a one-byte scheme flag or a three-byte intent prefix respectively.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Iterable, List, Tuple

from nacl.encoding import RawEncoder
from nacl.hash import blake2b
from pybip39 import Mnemonic, Seed


ED25519_FLAG = 0x00
SUI_DERIVATION_PATH = "m/44'/784'/0'/0'/0'"
HARDENED_OFFSET = 0x80000000

# IntentScope::TransactionData, IntentVersion::V0, AppId::Sui
TRANSACTION_INTENT = bytes([0, 0, 0])

_SLIP10_ED25519_KEY = b"ed25519 seed"


def seed_from_mnemonic(mnemonic_phrase: str, passphrase: str = "") -> bytes:
    """Return the 64-byte BIP-39 seed for *mnemonic_phrase*."""

    seed = Seed(Mnemonic.from_phrase(mnemonic_phrase), passphrase)
    return bytes(seed)


def parse_derivation_path(path: str) -> List[int]:
    """Turn ``m/44'/784'/0'/0'/0'`` into hardened child indices."""

    parts = path.split("/")
    if not parts or parts[0] != "m":
        raise ValueError(f"Derivation path must start with 'm': {path!r}")

    indices = []
    for part in parts[1:]:
        if not part.endswith("'"):
            raise ValueError("Ed25519 derivation supports hardened indices only")
        try:
            index = int(part[:-1])
        except ValueError as exc:
            raise ValueError(f"Invalid path segment {part!r}") from exc
        if not 0 <= index < HARDENED_OFFSET:
            raise ValueError(f"Path segment out of range: {part!r}")
        indices.append(index + HARDENED_OFFSET)
    return indices


def _hmac_sha512(key: bytes, data: bytes) -> Tuple[bytes, bytes]:
    digest = hmac.new(key, data, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive_ed25519_key(seed: bytes, path: str = SUI_DERIVATION_PATH) -> bytes:
    """Derive the 32-byte Ed25519 private seed at *path* (SLIP-0010)."""

    key, chain_code = _hmac_sha512(_SLIP10_ED25519_KEY, seed)
    for index in parse_derivation_path(path):
        data = b"\x00" + key + index.to_bytes(4, "big")
        key, chain_code = _hmac_sha512(chain_code, data)
    return key


def blake2b_256(*chunks: Iterable[bytes]) -> bytes:
    """BLAKE2b with a 32-byte digest over the concatenation of *chunks*."""

    data = b"".join(bytes(chunk) for chunk in chunks)
    return blake2b(data, digest_size=32, encoder=RawEncoder)


def public_key_to_address(public_key: bytes) -> str:
    """Return the ``0x``-prefixed Sui address for an Ed25519 public key."""

    if len(public_key) != 32:
        raise ValueError("Ed25519 public keys must be 32 bytes long")
    return "0x" + blake2b_256(bytes([ED25519_FLAG]), public_key).hex()


def transaction_digest(tx_bytes: bytes) -> bytes:
    """Digest that gets signed for a transaction: BLAKE2b(intent || tx)."""

    return blake2b_256(TRANSACTION_INTENT, tx_bytes)


def serialize_signature(signature: bytes, public_key: bytes) -> str:
    """Encode ``flag || signature || public key`` as base64 for the node."""

    if len(signature) != 64:
        raise ValueError("Ed25519 signatures must be 64 bytes long")
    payload = bytes([ED25519_FLAG]) + signature + public_key
    return base64.b64encode(payload).decode("ascii")


__all__ = [
    "ED25519_FLAG",
    "SUI_DERIVATION_PATH",
    "TRANSACTION_INTENT",
    "blake2b_256",
    "derive_ed25519_key",
    "parse_derivation_path",
    "public_key_to_address",
    "seed_from_mnemonic",
    "serialize_signature",
    "transaction_digest",
]
