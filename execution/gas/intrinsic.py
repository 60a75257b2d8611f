"""
execution.gas.intrinsic - intrinsic and execution gas schedule.

Intrinsic gas covers the base cost by tx kind plus calldata bytes, priced the
Ethereum way (zero bytes are cheaper than non-zero bytes). Execution gas is
charged by the host for storage writes, event emission and cross-contract
calls via `GasSchedule`.

    intrinsic_gas(b"\\x00\\x01", deploy=False)  # 21000 + 4 + 16
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GasSchedule:
    tx_base: int = 21_000
    deploy_base: int = 32_000
    calldata_zero: int = 4
    calldata_nonzero: int = 16
    storage_write: int = 20_000
    storage_read: int = 2_100
    log_base: int = 375
    log_topic: int = 375
    log_byte: int = 8
    call_base: int = 2_600
    word: int = 3

    def log_cost(self, n_topics: int, n_bytes: int) -> int:
        return self.log_base + self.log_topic * n_topics + self.log_byte * n_bytes

    def storage_write_cost(self, n_bytes: int) -> int:
        return self.storage_write + self.word * ((n_bytes + 31) // 32)


DEFAULT_SCHEDULE = GasSchedule()


def intrinsic_gas(data: bytes, *, deploy: bool, schedule: GasSchedule = DEFAULT_SCHEDULE) -> int:
    zeros = data.count(0)
    nonzeros = len(data) - zeros
    gas = schedule.tx_base + zeros * schedule.calldata_zero + nonzeros * schedule.calldata_nonzero
    if deploy:
        gas += schedule.deploy_base
    return gas


__all__ = ["GasSchedule", "DEFAULT_SCHEDULE", "intrinsic_gas"]
