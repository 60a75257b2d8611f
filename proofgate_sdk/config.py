"""
SDK configuration: network, RPC endpoint, chain id, retries/timeouts and the
signing key.

- Loads defaults for a known network and applies overrides from environment
  variables (PROOFGATE_*, <NETWORK>_RPC_URL, PRIVATE_KEY).
- Unknown networks and malformed values raise ConfigurationError.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .version import user_agent

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


@dataclass(frozen=True)
class NetworkInfo:
    name: str
    chain_id: int
    rpc_url: str


NETWORKS: Dict[str, NetworkInfo] = {
    "devnet": NetworkInfo("devnet", 1337, "http://127.0.0.1:8545"),
}


def get_network(name: str) -> NetworkInfo:
    try:
        return NETWORKS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise ConfigurationError(f"unknown network {name!r} (known: {known})") from None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _parse_chain_id(val: Any, default: int) -> int:
    """Accepts int, decimal str, or 0x-hex str."""
    if val is None or val == "":
        return int(default)
    if isinstance(val, int):
        return val
    s = str(val).strip()
    try:
        return int(s, 16) if _HEX_RE.match(s) else int(s, 10)
    except ValueError:
        raise ConfigurationError(f"invalid chain id {val!r}") from None


def _num(name: str, default: str, kind: type) -> Any:
    raw = _env(name, default)
    try:
        return kind(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a {kind.__name__}, got {raw!r}") from None


def _ensure_http(url: str) -> str:
    if not url.lower().startswith(("http://", "https://")):
        raise ConfigurationError(f"RPC URL must start with http:// or https://, got {url!r}")
    return url


@dataclass(frozen=True)
class SDKConfig:
    network: str = "devnet"
    rpc_url: str = NETWORKS["devnet"].rpc_url
    chain_id: int = NETWORKS["devnet"].chain_id
    request_timeout: float = 10.0
    max_retries: int = 3
    confirmation_timeout: float = 60.0
    poll_interval: float = 0.25
    deployments_dir: Path = Path("deployments")
    private_key: Optional[str] = field(default=None, repr=False)
    user_agent: str = field(default_factory=user_agent)

    @classmethod
    def from_env(cls, network: str = "devnet") -> "SDKConfig":
        """
        Create config for `network` from environment variables:

        PROOFGATE_RPC_URL / <NETWORK>_RPC_URL   endpoint (generic wins)
        PROOFGATE_CHAIN_ID                      int or 0x-hex
        PROOFGATE_TIMEOUT                       HTTP timeout, seconds
        PROOFGATE_MAX_RETRIES                   transport retries per request
        PROOFGATE_CONFIRM_TIMEOUT               wait-for-receipt limit, seconds
        PROOFGATE_POLL_INTERVAL                 initial receipt poll interval
        PROOFGATE_DEPLOYMENTS_DIR               where <network>.json records live
        PRIVATE_KEY                             32-byte Ed25519 seed, hex
        """
        net = get_network(network)
        rpc = _env("PROOFGATE_RPC_URL") or _env(f"{net.name.upper()}_RPC_URL") or net.rpc_url
        cfg = cls(
            network=net.name,
            rpc_url=_ensure_http(rpc),
            chain_id=_parse_chain_id(_env("PROOFGATE_CHAIN_ID"), net.chain_id),
            request_timeout=_num("PROOFGATE_TIMEOUT", "10.0", float),
            max_retries=_num("PROOFGATE_MAX_RETRIES", "3", int),
            confirmation_timeout=_num("PROOFGATE_CONFIRM_TIMEOUT", "60.0", float),
            poll_interval=_num("PROOFGATE_POLL_INTERVAL", "0.25", float),
            deployments_dir=Path(_env("PROOFGATE_DEPLOYMENTS_DIR", "deployments")),
            private_key=_env("PRIVATE_KEY"),
        )
        if cfg.max_retries < 0 or cfg.confirmation_timeout <= 0 or cfg.poll_interval <= 0:
            raise ConfigurationError("retries must be >= 0 and timeouts/intervals > 0")
        return cfg

    def with_overrides(self, **overrides: Any) -> "SDKConfig":
        """Copy with keyword overrides; unknown keys are ignored."""
        known = {k: v for k, v in overrides.items() if k in self.__dataclass_fields__}
        if "rpc_url" in known:
            _ensure_http(known["rpc_url"])
        return replace(self, **known)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def require_private_key(self) -> str:
        if not self.private_key:
            raise ConfigurationError("PRIVATE_KEY is not set")
        return self.private_key


__all__ = ["NetworkInfo", "NETWORKS", "get_network", "SDKConfig"]
