"""
HTTP JSON-RPC client (sync).

- httpx-based; the underlying `httpx.Client` can be injected, which is how
  tests drive the real node app through FastAPI's TestClient.
- Retries on transient transport failures and 429/502/503/504 with
  exponential backoff + jitter. JSON-RPC error objects are never retried.
  A resent `tx.sendRawTransaction` is harmless: the node deduplicates by tx
  hash and answers with DUPLICATE_TX, which `tx.send.send_signed` accepts.

Example:
    from proofgate_sdk.rpc.http import RpcClient
    with RpcClient("http://127.0.0.1:8545/rpc") as rpc:
        head = rpc.call("chain.getHead")
        print(head["height"])
"""

from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Union

import httpx

from ..errors import NetworkFailure, from_jsonrpc_error
from ..version import user_agent

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]


def _is_retriable_http(status: int) -> bool:
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


def rpc_endpoint(url: str) -> str:
    """Node base URL → its JSON-RPC endpoint (appends /rpc if missing)."""
    url = url.rstrip("/")
    return url if url.endswith("/rpc") else url + "/rpc"


class _Retriable(Exception):
    pass


@dataclass
class RpcClient:
    """Synchronous JSON-RPC 2.0 client over HTTP."""

    url: str
    timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    client: Optional[httpx.Client] = None
    _ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)
    _owns_client: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self.url = rpc_endpoint(self.url)
        merged: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if self.headers:
            merged.update(dict(self.headers))
        self.headers = merged
        if self.client is None:
            self.client = httpx.Client(timeout=self.timeout, headers=merged)
            self._owns_client = True

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        # injected clients belong to the caller
        if self._owns_client and self.client is not None:
            self.client.close()
            self.client = None

    # --- public API ------------------------------------------------------

    def request(self, method: str, params: Params = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise RpcError."""
        payload = self._make_payload(method, params)
        resp = self._send_with_retries(payload, method)
        if not isinstance(resp, dict):
            raise NetworkFailure("invalid JSON-RPC response type", url=self.url, method=method)
        if resp.get("error") is not None:
            raise from_jsonrpc_error(resp["error"], method=method, request_id=resp.get("id"))
        if "result" not in resp:
            raise NetworkFailure("malformed JSON-RPC response (no result)", url=self.url, method=method)
        return resp["result"]

    call = request

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        if params is None:
            params = []
        elif isinstance(params, Mapping):
            params = dict(params)
        else:
            params = list(params)
        return {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

    def _send_with_retries(self, payload: Dict[str, Any], method: str) -> JSON:
        last: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                return self._send_once(payload)
            except _Retriable as e:
                last = e
                if attempt > self.max_retries:
                    break
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.debug("rpc %s attempt %d failed (%s); retrying in %.2fs", method, attempt, e, delay)
                time.sleep(delay)
        raise NetworkFailure(f"RPC transport failed: {last}", url=self.url, method=method)

    def _send_once(self, payload: Dict[str, Any]) -> JSON:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        assert self.client is not None, "RpcClient is closed"
        try:
            r = self.client.post(self.url, content=body, headers=self.headers)
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise _Retriable(str(e)) from e
        if _is_retriable_http(r.status_code):
            raise _Retriable(f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise NetworkFailure(
                f"non-JSON response (HTTP {r.status_code}): {r.text[:256]}",
                url=self.url,
                method=str(payload.get("method")),
            ) from e


__all__ = ["RpcClient", "rpc_endpoint"]
