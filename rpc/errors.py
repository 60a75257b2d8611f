"""
JSON-RPC errors for the proofgate node.

This module provides:
- Canonical JSON-RPC 2.0 error codes (parse/invalid request/method not found/invalid params/internal).
- The EVM-style "execution reverted" code (3) used by `state.call`.
- Transaction-admission codes in the reserved -32000..-32099 range.
- Exception classes that carry (code, message, data).
- Helpers to convert ledger exceptions → JSON-RPC error objects.

Usage (from rpc/jsonrpc.py):
    from .errors import to_error, error_response

    try:
        result = handle(method, params)
        return {"jsonrpc": "2.0", "id": req_id, "result": result}
    except Exception as e:
        return error_response(req_id, to_error(e))

Notes:
- `data` SHOULD be small, stable, and safe to expose. Never raw tracebacks.
- For EXECUTION_REVERTED, `data` is the 0x-hex revert payload (possibly "0x").
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Union

from execution.errors import InvalidTx as LedgerInvalidTx

log = logging.getLogger(__name__)


# ───────────────────────────────────────────────────────────────────────────────
# Codes
# ───────────────────────────────────────────────────────────────────────────────

class JsonRpcCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class ProofgateCode(IntEnum):
    EXECUTION_REVERTED = 3
    SERVER_ERROR = -32000
    NOT_FOUND = -32004

    # Transaction admission. Keep these stable; append new codes at the end.
    INVALID_TX = -32010
    CHAIN_ID_MISMATCH = -32011
    BAD_SIGNATURE = -32012
    NONCE_TOO_LOW = -32014
    NONCE_GAP = -32015
    DUPLICATE_TX = -32016
    UNKNOWN_CODE = -32017


# InvalidTx.reason → code
_TX_REASON_CODES: Dict[str, ProofgateCode] = {
    "MALFORMED": ProofgateCode.INVALID_TX,
    "CHAIN_ID_MISMATCH": ProofgateCode.CHAIN_ID_MISMATCH,
    "BAD_SIGNATURE": ProofgateCode.BAD_SIGNATURE,
    "NONCE_TOO_LOW": ProofgateCode.NONCE_TOO_LOW,
    "NONCE_GAP": ProofgateCode.NONCE_GAP,
    "DUPLICATE": ProofgateCode.DUPLICATE_TX,
    "UNKNOWN_CODE": ProofgateCode.UNKNOWN_CODE,
}


# ───────────────────────────────────────────────────────────────────────────────
# Error base & concrete types
# ───────────────────────────────────────────────────────────────────────────────

@dataclass
class RpcError(Exception):
    code: int
    message: str
    data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        err: Dict[str, Any] = {"code": int(self.code), "message": str(self.message)}
        if self.data is not None:
            err["data"] = self.data
        return err

    def __str__(self) -> str:  # pragma: no cover
        return f"[{self.code}] {self.message} ({self.data})"


class ParseError(RpcError):
    def __init__(self, detail: str = "Parse error") -> None:
        super().__init__(JsonRpcCode.PARSE_ERROR, "Parse error", detail)


class InvalidRequest(RpcError):
    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(JsonRpcCode.INVALID_REQUEST, "Invalid request", detail)


class MethodNotFound(RpcError):
    def __init__(self, method: str) -> None:
        super().__init__(JsonRpcCode.METHOD_NOT_FOUND, "Method not found", {"method": method})


class InvalidParams(RpcError):
    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(JsonRpcCode.INVALID_PARAMS, "Invalid params", detail)


class InternalError(RpcError):
    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(JsonRpcCode.INTERNAL_ERROR, "Internal error", detail)


class NotFound(RpcError):
    def __init__(self, what: str = "resource") -> None:
        super().__init__(ProofgateCode.NOT_FOUND, f"{what} not found", None)


class ExecutionReverted(RpcError):
    def __init__(self, revert_data: bytes, reason: Optional[str] = None) -> None:
        msg = "execution reverted" + (f": {reason}" if reason else "")
        super().__init__(ProofgateCode.EXECUTION_REVERTED, msg, "0x" + bytes(revert_data).hex())


class TxRejected(RpcError):
    def __init__(self, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code, message, data)


# ───────────────────────────────────────────────────────────────────────────────
# Helpers
# ───────────────────────────────────────────────────────────────────────────────

def from_invalid_tx(exc: LedgerInvalidTx) -> TxRejected:
    code = _TX_REASON_CODES.get(exc.reason, ProofgateCode.INVALID_TX)
    return TxRejected(code, exc.message, dict(exc.data or {}))


def error_response(req_id: Optional[Union[str, int]], err: RpcError) -> Dict[str, Any]:
    """
    Build a JSON-RPC error response dict.
    """
    return {"jsonrpc": "2.0", "id": req_id, "error": err.to_dict()}


def to_error(exc: Exception) -> RpcError:
    """
    Convert any Exception into a RpcError.
    - RpcError passes through.
    - Ledger InvalidTx maps onto the admission codes.
    - ValueError/TypeError raised while handling params → InvalidParams.
    - Anything else → InternalError with a terse message (logged with traceback).
    """
    if isinstance(exc, RpcError):
        return exc
    if isinstance(exc, LedgerInvalidTx):
        return from_invalid_tx(exc)
    if isinstance(exc, (ValueError, TypeError)):
        return InvalidParams(str(exc))
    log.exception("internal error while handling JSON-RPC request", exc_info=exc)
    return InternalError(exc.__class__.__name__)


__all__ = [
    "RpcError",
    "JsonRpcCode",
    "ProofgateCode",
    "ParseError",
    "InvalidRequest",
    "MethodNotFound",
    "InvalidParams",
    "InternalError",
    "NotFound",
    "ExecutionReverted",
    "TxRejected",
    "from_invalid_tx",
    "error_response",
    "to_error",
]
