"""
execution.types.events - event/log record type.

`LogEvent` is the deterministic container the host records when a contract
emits an event. Topics follow Ethereum conventions: topic0 is keccak256 of the
event signature, indexed arguments follow; non-indexed arguments are
ABI-encoded into `data`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from core.utils.bytes import from_hex, to_hex


@dataclass(frozen=True)
class LogEvent:
    """
    Attributes:
        address: bytes - emitting contract (20 bytes)
        topics:  tuple[bytes, ...] - ordered 32-byte topics
        data:    bytes - ABI-encoded non-indexed arguments
    """
    address: bytes
    topics: Tuple[bytes, ...]
    data: bytes = b""

    def __post_init__(self) -> None:
        if len(self.address) != 20:
            raise ValueError("LogEvent.address must be 20 bytes")
        topics = tuple(bytes(t) for t in self.topics)
        if not topics:
            raise ValueError("LogEvent requires at least one topic")
        if any(len(t) != 32 for t in topics):
            raise ValueError("LogEvent topics must be 32 bytes")
        object.__setattr__(self, "topics", topics)
        object.__setattr__(self, "data", bytes(self.data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": to_hex(self.address),
            "topics": [to_hex(t) for t in self.topics],
            "data": to_hex(self.data),
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "LogEvent":
        return LogEvent(
            address=from_hex(d["address"]),
            topics=tuple(from_hex(t) for t in d["topics"]),
            data=from_hex(d.get("data", "0x")),
        )


__all__ = ["LogEvent"]
