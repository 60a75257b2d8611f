"""
Version helpers for the proofgate Python SDK.

The SDK ships in lockstep with the node, so the version comes from
`core.version` (overridable with PROOFGATE_VERSION for dev builds).
"""

from __future__ import annotations

from core.version import __version__


def user_agent() -> str:
    return f"proofgate-sdk-py/{__version__}"


__all__ = ["__version__", "user_agent"]
