"""
execution.types.result - ApplyResult container for transaction execution.

`ApplyResult` is what the executor returns for one applied transaction; the
receipt builder lifts it into the JSON receipt served over RPC.

Fields
------
* status           : TxStatus - SUCCESS / REVERT
* gas_used         : int      - intrinsic + execution gas
* logs             : tuple[LogEvent, ...] - emitted events in order (empty on revert)
* return_data      : bytes    - ABI-encoded return value on success
* revert_data      : bytes    - raw revert payload on revert (may be empty)
* contract_address : bytes | None - set for successful deploys
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from core.utils.bytes import to_hex

from .events import LogEvent
from .status import TxStatus


@dataclass(frozen=True)
class ApplyResult:
    status: TxStatus
    gas_used: int
    logs: Tuple[LogEvent, ...] = field(default_factory=tuple)
    return_data: bytes = b""
    revert_data: bytes = b""
    contract_address: Optional[bytes] = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": str(self.status),
            "gasUsed": int(self.gas_used),
            "logs": [lg.to_dict() for lg in self.logs],
            "returnData": to_hex(self.return_data),
            "revertData": to_hex(self.revert_data) if not self.is_success else None,
            "contractAddress": to_hex(self.contract_address) if self.contract_address else None,
        }


__all__ = ["ApplyResult"]
