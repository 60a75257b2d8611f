"""
execution.errors - execution-layer exceptions for the proofgate dev ledger.

The execution engine communicates failures via *typed exceptions* that are
converted into receipts and structured error payloads at higher layers.

Hierarchy
---------
ExecError (base)
 ├─ Revert          : Contract-triggered revert (carries raw revert data)
 │   └─ ContractError : Named custom error; revert data is its ABI selector
 └─ InvalidTx       : Transaction rejected before execution (never included)

Notes
-----
* `Revert` is a *semantic* failure of the transaction, not a node bug; it maps
  to a deterministic `revert` receipt and discards every state effect.
* `InvalidTx` is raised at admission (signature, chain id, nonce, unknown
  code) and carries a stable `reason` for the RPC layer to map onto codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from core.utils.hash import keccak256


@dataclass
class ExecError(Exception):
    """
    Base execution error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'REVERT', 'INVALID_TX').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "execution error"
    code: str = "EXEC_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs/RPC errors."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class Revert(ExecError):
    """
    Contract-triggered revert.

    `return_data` is the raw revert payload (ABI-encoded custom error, or
    empty for a bare revert). It is kept as bytes on the exception and
    mirrored as hex in `data` for JSON consumers.
    """
    def __init__(
        self,
        message: str = "reverted",
        *,
        return_data: bytes = b"",
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = dict(data or {})
        d.setdefault("return_data", "0x" + bytes(return_data).hex())
        super().__init__(message=message, code="REVERT", data=d)
        self.return_data = bytes(return_data)


class ContractError(Revert):
    """
    Base for argument-less custom errors declared by contracts.

    Subclasses set `signature` (e.g. ``"InvalidUrl()"``); the revert payload
    is the 4-byte selector keccak256(signature)[:4].
    """
    signature: ClassVar[str] = ""

    def __init__(self, message: Optional[str] = None):
        if not self.signature:
            raise TypeError(f"{type(self).__name__} must define a signature")
        super().__init__(message or self.kind(), return_data=self.selector())

    @classmethod
    def kind(cls) -> str:
        return cls.signature.split("(", 1)[0]

    @classmethod
    def selector(cls) -> bytes:
        return keccak256(cls.signature.encode("ascii"))[:4]


class InvalidTx(ExecError):
    """
    Transaction rejected at admission.

    `reason` is one of: MALFORMED, BAD_SIGNATURE, CHAIN_ID_MISMATCH,
    NONCE_TOO_LOW, NONCE_GAP, UNKNOWN_CODE, DUPLICATE.
    """
    def __init__(self, message: str = "invalid transaction", *, reason: str = "MALFORMED",
                 data: Optional[Dict[str, Any]] = None):
        d: Dict[str, Any] = dict(data or {})
        d.setdefault("reason", reason)
        super().__init__(message=message, code="INVALID_TX", data=d)
        self.reason = reason


__all__ = [
    "ExecError",
    "Revert",
    "ContractError",
    "InvalidTx",
]
