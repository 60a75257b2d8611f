"""
execution.gas - deterministic gas accounting for the dev ledger.

Gas here is informational (reported in receipts); there is no fee market and
no gas limit. See `execution.gas.intrinsic` for the schedule.
"""

from .intrinsic import DEFAULT_SCHEDULE, GasSchedule, intrinsic_gas

__all__ = ["DEFAULT_SCHEDULE", "GasSchedule", "intrinsic_gas"]
