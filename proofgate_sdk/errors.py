"""
Typed error classes for the Python SDK.

These are raised by rpc/http, tx/send, contracts/*, proofs/bundle, prover and
submit so callers can catch specific failure modes while still being able to
catch the base `ProofgateSdkError`.

Submission taxonomy
-------------------
- InvalidProofFile      proof bundle missing/unreadable/incomplete (before any network use)
- JournalDecodeFailure  journal bytes undecodable; *diagnostic only*, never raised by submit
- ValidationRejected    validator refused the journal (kind = one of VALIDATOR_ERRORS)
- UnrecognizedRevert    revert payload not matching any known error
- ConfirmationTimeout   transaction not observed in a block within the timeout
- NetworkFailure        transport fault talking to the node
- ConfigurationError    missing/invalid network, contract address, key, env
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "ProofgateSdkError",
    "JsonRpcCode",
    "RpcError",
    "NetworkFailure",
    "TxError",
    "AbiError",
    "ConfigurationError",
    "InvalidProofFile",
    "JournalDecodeFailure",
    "ValidationRejected",
    "UnrecognizedRevert",
    "ConfirmationTimeout",
    "ProverError",
    "from_jsonrpc_error",
]


class ProofgateSdkError(Exception):
    """Base class for all SDK errors."""


class JsonRpcCode(IntEnum):
    # JSON-RPC 2.0 spec
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    SERVER_ERROR = -32000

    # EVM-style "execution reverted" (data carries 0x-hex revert payload)
    EXECUTION_REVERTED = 3

    # Transaction admission
    INVALID_TX = -32010
    CHAIN_ID_MISMATCH = -32011
    BAD_SIGNATURE = -32012
    NONCE_TOO_LOW = -32014
    NONCE_GAP = -32015
    DUPLICATE_TX = -32016
    UNKNOWN_CODE = -32017


@dataclass
class RpcError(ProofgateSdkError):
    """Raised when a JSON-RPC call returns an error object."""

    method: Optional[str]
    code: int
    message: str
    data: Optional[Any] = None
    request_id: Optional[Any] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"RPC[{self.method or '-'}] code={self.code} msg={self.message!r}"]
        if self.request_id is not None:
            parts.append(f"id={self.request_id}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)


@dataclass
class NetworkFailure(ProofgateSdkError):
    """Transport-level fault (connection refused, timeout, malformed HTTP response)."""

    message: str
    url: Optional[str] = None
    method: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [{self.method} @ {self.url}]" if self.url else ""
        return f"NetworkFailure{where}: {self.message}"


@dataclass
class TxError(ProofgateSdkError):
    """
    A submitted transaction failed outside the validator's error taxonomy
    (e.g. a deployment reverted).
    """

    message: str
    tx_hash: Optional[str] = None
    receipt: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.tx_hash}" if self.tx_hash else ""
        return f"TxError{suffix}: {self.message}"


@dataclass
class AbiError(ProofgateSdkError):
    """ABI encoding/decoding failed (wrong arg types/lengths, bad return data)."""

    message: str
    function: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [fn={self.function}]" if self.function else ""
        return f"AbiError{where}: {self.message}"


@dataclass
class ConfigurationError(ProofgateSdkError):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class InvalidProofFile(ProofgateSdkError):
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" ({self.path})" if self.path else ""
        return f"invalid proof file{where}: {self.message}"


@dataclass
class JournalDecodeFailure(ProofgateSdkError):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"journal decode failed: {self.message}"


@dataclass
class ValidationRejected(ProofgateSdkError):
    """The validator rejected the submission with one of its named errors."""

    kind: str
    stage: str
    tx_hash: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        tx = f" tx={self.tx_hash}" if self.tx_hash else ""
        return f"validation rejected at {self.stage}: {self.kind}{tx}"


@dataclass
class UnrecognizedRevert(ProofgateSdkError):
    """A revert whose payload matches none of the known errors (or is empty)."""

    revert_data: str
    stage: str
    message: str = ""
    tx_hash: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        detail = f": {self.message}" if self.message else ""
        return f"unrecognized revert at {self.stage} data={self.revert_data}{detail}"


@dataclass
class ConfirmationTimeout(ProofgateSdkError):
    tx_hash: str
    timeout_s: float

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"transaction {self.tx_hash} not confirmed within {self.timeout_s:g}s"


@dataclass
class ProverError(ProofgateSdkError):
    """The web-prover / compression service failed or returned an unusable body."""

    message: str
    status: Optional[int] = None
    body: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        st = f" http={self.status}" if self.status is not None else ""
        return f"ProverError{st}: {self.message}"


def from_jsonrpc_error(
    err_obj: Dict[str, Any],
    *,
    method: Optional[str] = None,
    request_id: Optional[Any] = None,
    http_status: Optional[int] = None,
) -> RpcError:
    """
    Convert a JSON-RPC error object into RpcError.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}
    """
    code = int(err_obj.get("code", JsonRpcCode.SERVER_ERROR))
    message = str(err_obj.get("message", "Unknown JSON-RPC error"))
    return RpcError(
        method=method,
        code=code,
        message=message,
        data=err_obj.get("data"),
        request_id=request_id,
        http_status=http_status,
    )
