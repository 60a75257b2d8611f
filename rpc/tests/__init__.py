"""
Test utilities for the proofgate node.

Usage in tests:
    from rpc.tests import new_test_client, rpc_call

    def test_health():
        client, cfg, ledger = new_test_client()
        assert client.get("/healthz").json()["ok"] is True

    def test_rpc_example():
        client, cfg, _ = new_test_client()
        res = rpc_call(client, "chain.getChainId")
        assert res["result"] == cfg.chain_id
"""
from __future__ import annotations

import typing as t

from fastapi.testclient import TestClient

from execution.ledger import Ledger
from rpc import config as rpc_config
from rpc import server as rpc_server


def make_test_config(**overrides: t.Any) -> rpc_config.Config:
    """Build a minimal Config suitable for tests (quiet logs, wide-open CORS)."""
    fields: dict[str, t.Any] = dict(
        host="127.0.0.1",
        port=0,  # unused by TestClient
        chain_id=1337,
        log_level="ERROR",
        cors_allow_origins=["*"],
    )
    fields.update(overrides)
    return rpc_config.Config(**fields)


def new_test_client(
    ledger: Ledger | None = None, **overrides: t.Any
) -> tuple[TestClient, rpc_config.Config, Ledger]:
    """
    Create a TestClient bound to a fresh app (and a fresh ledger unless given).
    Returns (client, cfg, ledger).
    """
    cfg = make_test_config(**overrides)
    app = rpc_server.create_app(cfg, ledger)
    return TestClient(app), cfg, app.state.node.ledger


def rpc_call(
    client: TestClient,
    method: str,
    params: t.Any | None = None,
    *,
    id: t.Any = 1,
    expect_error: bool = False,
) -> dict:
    """
    POST a JSON-RPC request to /rpc and return the parsed response.
    Set expect_error=True to assert an 'error' object is present.
    """
    payload: dict = {"jsonrpc": "2.0", "method": method, "id": id}
    if params is not None:
        payload["params"] = params
    resp = client.post("/rpc", json=payload)
    assert resp.status_code == 200, f"HTTP {resp.status_code}: {resp.text}"
    data = resp.json()
    if expect_error:
        assert "error" in data, f"expected JSON-RPC error, got {data}"
    else:
        assert "result" in data, f"expected JSON-RPC result, got {data}"
    return data


__all__ = ["new_test_client", "rpc_call", "make_test_config"]
