"""
Web-proof prover client.

Two HTTP calls turn a URL into a submittable proof bundle:

1. POST {web_prover_url}/prove                 {url, headers}
   → a notarized *presentation* of the HTTPS exchange
2. POST {zk_prover_url}/compress-web-proof     {presentation, extraction}
   → {success, data: {zkProof, journalDataAbi}}

The extraction selects which part of the response body ends up as the
journal's `balance` field; the default takes the JSON `result` member.

Environment: WEB_PROVER_URL, ZK_PROVER_API_URL, WEB_PROVER_API_CLIENT_ID,
WEB_PROVER_API_SECRET.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from .errors import InvalidProofFile, ProverError
from .proofs.bundle import ProofBundle, parse_proof_bundle
from .version import user_agent

log = logging.getLogger(__name__)

DEFAULT_WEB_PROVER_URL = "https://web-prover.vlayer.xyz/api/v1"
DEFAULT_ZK_PROVER_URL = "https://zk-prover.vlayer.xyz/api/v0"
DEFAULT_EXTRACTION: Dict[str, Any] = {"response.body": {"jmespath": ["result"]}}
COMPRESS_TIMEOUT_S = 85.0


@dataclass
class WebProverClient:
    web_prover_url: str = DEFAULT_WEB_PROVER_URL
    zk_prover_url: str = DEFAULT_ZK_PROVER_URL
    client_id: str = ""
    secret: str = field(default="", repr=False)
    timeout: float = COMPRESS_TIMEOUT_S
    client: Optional[httpx.Client] = None
    _owns_client: bool = field(init=False, default=False, repr=False)

    @classmethod
    def from_env(cls, **overrides: Any) -> "WebProverClient":
        kw: Dict[str, Any] = {
            "web_prover_url": os.getenv("WEB_PROVER_URL") or DEFAULT_WEB_PROVER_URL,
            "zk_prover_url": os.getenv("ZK_PROVER_API_URL") or DEFAULT_ZK_PROVER_URL,
            "client_id": os.getenv("WEB_PROVER_API_CLIENT_ID", ""),
            "secret": os.getenv("WEB_PROVER_API_SECRET", ""),
        }
        kw.update(overrides)
        return cls(**kw)

    def __post_init__(self) -> None:
        self.web_prover_url = self.web_prover_url.rstrip("/")
        self.zk_prover_url = self.zk_prover_url.rstrip("/")
        if self.client is None:
            self.client = httpx.Client(timeout=self.timeout)
            self._owns_client = True

    def __enter__(self) -> "WebProverClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._owns_client and self.client is not None:
            self.client.close()
            self.client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": user_agent(),
            "x-client-id": self.client_id,
            "Authorization": f"Bearer {self.secret}",
        }

    def _post(self, url: str, body: Mapping[str, Any]) -> Any:
        assert self.client is not None, "WebProverClient is closed"
        try:
            r = self.client.post(url, json=dict(body), headers=self._headers(), timeout=self.timeout)
        except httpx.HTTPError as e:
            raise ProverError(f"request to {url} failed: {e}") from e
        if not r.is_success:
            log.error("prover error response from %s: HTTP %d %s", url, r.status_code, r.text[:512])
            raise ProverError(f"{url} returned HTTP {r.status_code}", status=r.status_code, body=r.text)
        try:
            return r.json()
        except ValueError as e:
            raise ProverError(f"{url} returned non-JSON body", status=r.status_code, body=r.text) from e

    def prove(self, url: str, headers: Sequence[str] = ()) -> Dict[str, Any]:
        """Notarize a GET of `url`; returns the presentation object."""
        presentation = self._post(f"{self.web_prover_url}/prove", {"url": url, "headers": list(headers)})
        if not isinstance(presentation, dict) or not presentation.get("data"):
            raise ProverError("no presentation data found in response", body=str(presentation)[:512])
        log.info("web proof obtained for %s", url)
        return presentation

    def compress(
        self, presentation: Mapping[str, Any], extraction: Optional[Mapping[str, Any]] = None
    ) -> ProofBundle:
        """Compress a presentation into a zk proof bundle."""
        body = {"presentation": dict(presentation), "extraction": dict(extraction or DEFAULT_EXTRACTION)}
        out = self._post(f"{self.zk_prover_url}/compress-web-proof", body)
        if not isinstance(out, dict) or out.get("success") is False:
            raise ProverError("compression failed", body=str(out)[:512])
        try:
            return parse_proof_bundle(out)
        except InvalidProofFile as e:
            raise ProverError(f"unusable compression response: {e}", body=str(out)[:512]) from e

    def prove_and_compress(
        self,
        url: str,
        headers: Sequence[str] = (),
        extraction: Optional[Mapping[str, Any]] = None,
    ) -> ProofBundle:
        return self.compress(self.prove(url, headers), extraction)


__all__ = [
    "DEFAULT_WEB_PROVER_URL",
    "DEFAULT_ZK_PROVER_URL",
    "DEFAULT_EXTRACTION",
    "WebProverClient",
]
