"""
Test utilities for the SDK.

The node's FastAPI TestClient is an `httpx.Client`, so it can be injected
straight into RpcClient and every SDK call runs against the real app:

    from proofgate_sdk.tests import node_rpc

    rpc, ledger = node_rpc()
    assert rpc.call("chain.getChainId") == 1337
"""
from __future__ import annotations

import json
import typing as t
from pathlib import Path

from execution.ledger import Ledger
from proofgate_sdk.rpc.http import RpcClient
from rpc.tests import new_test_client

TEST_URL = "http://testserver"


def node_rpc(ledger: Ledger | None = None, **overrides: t.Any) -> tuple[RpcClient, Ledger]:
    """RpcClient bound to a fresh in-process node; returns (rpc, ledger)."""
    client, _cfg, ledger = new_test_client(ledger, **overrides)
    return RpcClient(TEST_URL, client=client, max_retries=0), ledger


def write_bundle(path: Path, journal: bytes, seal: bytes, *, nested: bool = True) -> Path:
    fields = {"zkProof": "0x" + seal.hex(), "journalDataAbi": "0x" + journal.hex()}
    obj = {"success": True, "data": fields} if nested else {"success": True, **fields}
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


__all__ = ["TEST_URL", "node_rpc", "write_bundle"]
