from __future__ import annotations

import json

import httpx
import pytest

from proofgate_sdk.errors import ProverError
from proofgate_sdk.prover import DEFAULT_EXTRACTION, WebProverClient

PRESENTATION = {"success": True, "data": "0xfeed", "version": "1", "meta": {"notaryUrl": "https://notary"}}
COMPRESSED = {"success": True, "data": {"zkProof": "0xAA", "journalDataAbi": "0x0102"}}


def _prover(handler, **kw) -> WebProverClient:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return WebProverClient(
        web_prover_url="https://web.test/api/v1/",
        zk_prover_url="https://zk.test/api/v0",
        client_id="cid",
        secret="s3cret",
        client=client,
        **kw,
    )


def test_prove_then_compress():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/v1/prove":
            return httpx.Response(200, json=PRESENTATION)
        if request.url.path == "/api/v0/compress-web-proof":
            return httpx.Response(200, json=COMPRESSED)
        return httpx.Response(404)

    bundle = _prover(handler).prove_and_compress("https://api.example.com/v1/balance?x=1")
    assert bundle.seal == b"\xaa"
    assert bundle.journal == b"\x01\x02"

    prove_req, compress_req = seen
    assert json.loads(prove_req.content) == {"url": "https://api.example.com/v1/balance?x=1", "headers": []}
    body = json.loads(compress_req.content)
    assert body["presentation"] == PRESENTATION
    assert body["extraction"] == DEFAULT_EXTRACTION
    for req in seen:
        assert req.headers["x-client-id"] == "cid"
        assert req.headers["authorization"] == "Bearer s3cret"


def test_custom_extraction_is_forwarded():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=COMPRESSED)

    extraction = {"response.body": {"jmespath": ["data.balance"]}}
    _prover(handler).compress(PRESENTATION, extraction)
    assert bodies[0]["extraction"] == extraction


def test_missing_presentation_data():
    handler = lambda r: httpx.Response(200, json={"success": False})  # noqa: E731
    with pytest.raises(ProverError, match="no presentation data"):
        _prover(handler).prove("https://api.example.com")


def test_http_error_status():
    handler = lambda r: httpx.Response(502, text="upstream down")  # noqa: E731
    with pytest.raises(ProverError) as ei:
        _prover(handler).compress(PRESENTATION)
    assert ei.value.status == 502
    assert ei.value.body == "upstream down"


def test_unusable_compression_body():
    handler = lambda r: httpx.Response(200, json={"success": True, "data": {"zkProof": "0xaa"}})  # noqa: E731
    with pytest.raises(ProverError, match="unusable"):
        _prover(handler).compress(PRESENTATION)


def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    with pytest.raises(ProverError, match="failed"):
        _prover(handler).prove("https://api.example.com")


def test_from_env(monkeypatch):
    monkeypatch.setenv("WEB_PROVER_URL", "https://wp.local/")
    monkeypatch.setenv("ZK_PROVER_API_URL", "https://zk.local")
    monkeypatch.setenv("WEB_PROVER_API_CLIENT_ID", "id-1")
    monkeypatch.setenv("WEB_PROVER_API_SECRET", "topsecret-value")
    with WebProverClient.from_env() as p:
        assert p.web_prover_url == "https://wp.local"
        assert p.zk_prover_url == "https://zk.local"
        assert p.client_id == "id-1"
        assert "topsecret-value" not in repr(p)
