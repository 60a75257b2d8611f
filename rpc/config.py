"""
Proofgate node configuration.

Tunables for the HTTP JSON-RPC node that fronts the dev ledger:
- host/port
- chain id
- block production (automine, or a fixed block time)
- CORS allowlist
- logging level

Environment variables (examples):
  PROOFGATE_NODE_HOST=0.0.0.0
  PROOFGATE_NODE_PORT=8545
  PROOFGATE_CHAIN_ID=1337
  PROOFGATE_AUTOMINE=false
  PROOFGATE_BLOCK_TIME=2.0
  PROOFGATE_CORS_ORIGINS=["http://localhost:5173"]
  PROOFGATE_LOG_LEVEL=INFO

Notes
- List values accept either JSON or a comma-separated list.
- Malformed numbers fall back to the default.
- This module has no external deps (no dotenv). Use your process manager to inject env.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8545
DEFAULT_CHAIN_ID = 1337


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = _env(name)
    if v is None:
        return default
    try:
        return int(v.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = _env(name)
    if v is None:
        return default
    try:
        return float(v.strip())
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    """
    Parse JSON array or comma-separated string into a list of strings.
    """
    v = _env(name)
    if v is None or v.strip() == "":
        return list(default)
    s = v.strip()
    if s.startswith("["):
        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return [str(x) for x in parsed]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in s.split(",") if item.strip()]


@dataclass(frozen=True)
class Config:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    chain_id: int = DEFAULT_CHAIN_ID
    automine: bool = True
    block_time: float = 0.0
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def background_mining(self) -> bool:
        return not self.automine and self.block_time > 0

    @classmethod
    def from_env(cls) -> "Config":
        """Build a Config from environment variables with sensible defaults."""
        return cls(
            host=_env("PROOFGATE_NODE_HOST", DEFAULT_HOST) or DEFAULT_HOST,
            port=_env_int("PROOFGATE_NODE_PORT", DEFAULT_PORT),
            chain_id=_env_int("PROOFGATE_CHAIN_ID", DEFAULT_CHAIN_ID),
            automine=_env_bool("PROOFGATE_AUTOMINE", True),
            block_time=max(0.0, _env_float("PROOFGATE_BLOCK_TIME", 0.0)),
            log_level=(_env("PROOFGATE_LOG_LEVEL", "INFO") or "INFO").upper(),
            cors_allow_origins=_env_list("PROOFGATE_CORS_ORIGINS", ["http://localhost:5173"]),
        )


def load_config() -> Config:
    return Config.from_env()


__all__ = ["Config", "load_config", "DEFAULT_CHAIN_ID", "DEFAULT_PORT", "DEFAULT_HOST"]
