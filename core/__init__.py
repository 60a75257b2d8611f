"""
Proofgate core package.

Deterministic substrate shared by the contracts, the dev ledger, the RPC node
and the client SDK: byte/hash helpers, CBOR and Ethereum-ABI encoders, the
journal codec, the signed transaction model and logging setup.

Only re-exports the version here to keep import-time side effects near zero.
"""

from __future__ import annotations

from .version import __version__


def get_version() -> str:
    """Return the semantic version string for this package."""
    return __version__


__all__ = ["__version__", "get_version"]
