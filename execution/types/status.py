"""
execution.types.status - canonical transaction status enum.

TxStatus models the *logical* outcome of executing a transaction:
  - SUCCESS : Execution completed; all effects committed
  - REVERT  : Contract-triggered revert; no effects besides the nonce bump

String forms:
  - str(TxStatus.SUCCESS) -> "success"   (receipts, logs)
  - TxStatus.SUCCESS.code  -> "SUCCESS"
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class TxStatus(str, Enum):
    SUCCESS = "success"
    REVERT = "revert"

    @property
    def code(self) -> str:
        return self.value.upper()

    @property
    def is_success(self) -> bool:
        return self is TxStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str, *, default: Optional["TxStatus"] = None) -> "TxStatus":
        """Lenient parse: accepts "success"/"ok"/"0x1" and "revert"/"failed"/"0x0"."""
        norm = (s or "").strip().lower()
        if norm in {"success", "ok", "0x1", "1"}:
            return cls.SUCCESS
        if norm in {"revert", "reverted", "failed", "fail", "0x0", "0"}:
            return cls.REVERT
        if default is not None:
            return default
        raise ValueError(f"unknown TxStatus: {s!r}")


__all__ = ["TxStatus"]
