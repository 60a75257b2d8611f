from __future__ import annotations

import httpx
import pytest

from proofgate_sdk.errors import JsonRpcCode, NetworkFailure, RpcError
from proofgate_sdk.rpc import http as rpc_http
from proofgate_sdk.rpc.http import RpcClient, rpc_endpoint


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    slept = []
    monkeypatch.setattr(rpc_http.time, "sleep", lambda s: slept.append(s))
    return slept


def _mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_endpoint_normalization():
    assert rpc_endpoint("http://127.0.0.1:8545") == "http://127.0.0.1:8545/rpc"
    assert rpc_endpoint("http://127.0.0.1:8545/") == "http://127.0.0.1:8545/rpc"
    assert rpc_endpoint("http://h/rpc") == "http://h/rpc"


def test_call_against_node(rpc):
    assert rpc.call("chain.getChainId") == 1337
    head = rpc.call("chain.getHead")
    assert head["height"] == 0


def test_rpc_error_is_not_retried(rpc):
    with pytest.raises(RpcError) as ei:
        rpc.call("chain.nope")
    assert ei.value.code == JsonRpcCode.METHOD_NOT_FOUND
    assert ei.value.method == "chain.nope"


def test_named_params(rpc, signer):
    assert rpc.request("state.getNonce", {"address": signer.address_hex, "tag": "pending"}) == 0


def test_retries_transient_http_then_succeeds(no_sleep):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": 7})

    with RpcClient("http://node", client=_mock_client(handler), max_retries=3) as rpc:
        assert rpc.call("chain.getChainId") == 7
    assert len(calls) == 3
    assert len(no_sleep) == 2
    assert calls[0].headers["content-type"] == "application/json"
    assert calls[0].headers["user-agent"].startswith("proofgate-sdk-py/")


def test_transport_failure_becomes_network_failure(no_sleep):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    rpc = RpcClient("http://node", client=_mock_client(handler), max_retries=2)
    with pytest.raises(NetworkFailure) as ei:
        rpc.call("chain.getHead")
    assert len(attempts) == 3
    assert ei.value.method == "chain.getHead"
    assert ei.value.url == "http://node/rpc"


def test_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>oops</html>")

    with pytest.raises(NetworkFailure, match="non-JSON"):
        RpcClient("http://node", client=_mock_client(handler)).call("chain.getHead")


def test_response_without_result():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

    with pytest.raises(NetworkFailure, match="no result"):
        RpcClient("http://node", client=_mock_client(handler)).call("chain.getHead")


def test_injected_client_stays_open():
    client = _mock_client(lambda r: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None}))
    with RpcClient("http://node", client=client) as rpc:
        rpc.call("chain.getHead")
    assert not client.is_closed
    client.close()
