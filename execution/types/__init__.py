"""
execution.types - small dataclasses and enums shared across the execution
engine and the RPC layer.

Public surface (re-exported):
    TxStatus     : Enum - SUCCESS / REVERT
    LogEvent     : Dataclass - (address, topics, data)
    ApplyResult  : Dataclass - result of applying a tx
"""

from __future__ import annotations

from .events import LogEvent
from .result import ApplyResult
from .status import TxStatus

__all__ = ["TxStatus", "LogEvent", "ApplyResult"]
