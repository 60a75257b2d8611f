"""
Version helpers for proofgate.

- Exposes __version__ (PEP 440).
- PROOFGATE_VERSION env var overrides the in-tree default (useful for
  release builds that stamp a version without editing the source).
"""

from __future__ import annotations

import os

DEFAULT_VERSION = "0.1.0"


def resolve_version() -> str:
    env = os.getenv("PROOFGATE_VERSION")
    if env:
        return env.strip()
    return DEFAULT_VERSION


__version__ = resolve_version()


if __name__ == "__main__":
    print(__version__)
