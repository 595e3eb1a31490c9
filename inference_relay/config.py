"""Loading of the relay's TOML configuration file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "config.toml"
DEFAULT_RPC_URL = "https://sui-devnet-endpoint.blockvision.org"
DEFAULT_CALL_TIMEOUT = 60.0


@dataclass(frozen=True)
class RelayConfig:
    """Immutable settings shared by every request for the process lifetime."""

    mnemonic: str = field(repr=False)
    rpc_url: str = DEFAULT_RPC_URL
    call_timeout: float = DEFAULT_CALL_TIMEOUT


def load_config(path: str | None = None) -> RelayConfig:
    """Read *path* (or ``RELAY_CONFIG``/``config.toml``) into a :class:`RelayConfig`.

    ``SUI_RPC_URL`` in the environment takes precedence over the file's
    ``rpc_url``.
    """

    path = path or os.getenv("RELAY_CONFIG") or DEFAULT_CONFIG_PATH
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Error reading config file {path}: {exc}") from exc

    mnemonic = raw.get("mnemonic")
    if not isinstance(mnemonic, str) or not mnemonic.strip():
        raise ConfigError("Config key 'mnemonic' must be a non-empty string")

    rpc_url = os.getenv("SUI_RPC_URL") or raw.get("rpc_url", DEFAULT_RPC_URL)
    if not isinstance(rpc_url, str) or not rpc_url:
        raise ConfigError("Config key 'rpc_url' must be a non-empty string")

    call_timeout = raw.get("call_timeout", DEFAULT_CALL_TIMEOUT)
    # bool is an int subclass
    if isinstance(call_timeout, bool) or not isinstance(call_timeout, (int, float)):
        raise ConfigError("Config key 'call_timeout' must be a number")
    if call_timeout <= 0:
        raise ConfigError("Config key 'call_timeout' must be positive")

    return RelayConfig(
        mnemonic=mnemonic.strip(),
        rpc_url=rpc_url,
        call_timeout=float(call_timeout),
    )


__all__ = ["DEFAULT_CALL_TIMEOUT", "DEFAULT_RPC_URL", "RelayConfig", "load_config"]
