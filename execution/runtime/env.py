"""
execution.runtime.env - execution contexts handed to contract code.

- BlockEnv    : the block a transaction (or read-only call) executes in.
- GasCounter  : accumulates gas across a transaction and its nested calls.
- CallContext : the *only* way contract code touches the world. It scopes
  storage to the executing contract, buffers emitted events until the
  transaction commits, and routes calls to other contracts.

Contract code never sees the StateJournal directly, so everything it does is
covered by the transaction checkpoint opened in `execution.runtime.executor`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from core.encoding import abi
from core.utils.bytes import parse_address

from ..errors import Revert
from ..gas.intrinsic import DEFAULT_SCHEDULE, GasSchedule
from ..state.journal import StateJournal
from ..types.events import LogEvent

if TYPE_CHECKING:
    from .contracts import Contract

MAX_CALL_DEPTH = 64


@dataclass(frozen=True)
class BlockEnv:
    number: int
    timestamp: int
    chain_id: int


@dataclass
class GasCounter:
    schedule: GasSchedule = DEFAULT_SCHEDULE
    used: int = 0

    def charge(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("gas charge must be ≥ 0")
        self.used += int(amount)


@dataclass
class CallContext:
    """
    Per-frame view of the world for one contract invocation.

    `events` is shared by all frames of a transaction so logs keep emission
    order across nested calls. A frame running a view function is read-only:
    storage writes and event emission revert, in it and in what it calls.
    """
    state: StateJournal
    block: BlockEnv
    address: bytes
    caller: bytes
    origin: bytes
    gas: GasCounter = field(default_factory=GasCounter)
    events: List[LogEvent] = field(default_factory=list)
    depth: int = 0
    # set while a view function runs; inherited by nested calls
    read_only: bool = False

    # ------------------------------------------------------------- storage

    def _writable(self, what: str) -> None:
        if self.read_only:
            raise Revert(f"{what} inside a view function")

    def storage_get(self, key: bytes) -> Optional[bytes]:
        self.gas.charge(self.gas.schedule.storage_read)
        return self.state.storage_get(self.address, key)

    def storage_set(self, key: bytes, value: bytes) -> None:
        self._writable("storage write")
        self.gas.charge(self.gas.schedule.storage_write_cost(len(value)))
        self.state.storage_set(self.address, key, value)

    # ------------------------------------------------------------- events

    def emit(self, event: abi.AbiEntry, values: Sequence[Any]) -> LogEvent:
        self._writable("event emission")
        topics, data = abi.encode_event(event, values)
        self.gas.charge(self.gas.schedule.log_cost(len(topics), len(data)))
        log = LogEvent(address=self.address, topics=tuple(topics), data=data)
        self.events.append(log)
        return log

    # ------------------------------------------------------------- calls

    def call(self, target: Any, function: abi.AbiEntry, args: Sequence[Any]) -> Tuple[Any, ...]:
        """
        Call `function` on the contract at `target` with this contract as the
        caller. Reverts in the callee propagate as `Revert`.
        """
        from .contracts import load_contract
        from .dispatcher import dispatch

        if self.depth + 1 > MAX_CALL_DEPTH:
            raise Revert("call depth exceeded")
        to = parse_address(target, name="call target")
        self.gas.charge(self.gas.schedule.call_base)
        child = CallContext(
            state=self.state,
            block=self.block,
            address=to,
            caller=self.address,
            origin=self.origin,
            gas=self.gas,
            events=self.events,
            depth=self.depth + 1,
            read_only=self.read_only,
        )
        # a failed callee leaves no writes or events behind
        mark = len(self.events)
        self.state.begin()
        try:
            callee: "Contract" = load_contract(child)
            out = dispatch(callee, abi.encode_call(function, args))
        except BaseException:
            self.state.revert()
            del self.events[mark:]
            raise
        self.state.commit()
        return abi.decode_outputs(function, out)


__all__ = ["BlockEnv", "GasCounter", "CallContext", "MAX_CALL_DEPTH"]
