"""
core.encoding
=============

Public encoding surface:

- cbor.py: canonical CBOR dumps/loads (cbor2, deterministic map ordering),
  used for transactions and their sign-bytes.
- abi.py:  Ethereum-ABI helpers (eth-abi) for selectors, call data, event
  topics and custom-error decoding, used by contracts and the SDK.
"""

from __future__ import annotations

from .cbor import dumps as cbor_dumps
from .cbor import loads as cbor_loads

__all__ = ["cbor_dumps", "cbor_loads"]
