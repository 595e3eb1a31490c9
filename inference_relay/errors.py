"""Exception hierarchy shared by the relay modules."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay failures."""


class ConfigError(RelayError):
    """Configuration file missing, unreadable or incomplete."""


class UpstreamError(RelayError):
    """Any failure coming from signer derivation or the ledger node."""


class SignerError(UpstreamError):
    """The configured mnemonic could not be turned into a signing key."""


class RpcError(UpstreamError):
    """The node rejected a JSON-RPC call or could not be reached."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ClientDisconnected(RelayError):
    """The HTTP client went away while a ledger call was in flight."""


__all__ = [
    "ClientDisconnected",
    "ConfigError",
    "RelayError",
    "RpcError",
    "SignerError",
    "UpstreamError",
]
