"""
execution.state.journal - journaling writes, checkpoints, revert/commit.

Deterministic in-memory world state with nested checkpoints. Writes go to the
top overlay; reads consult overlays from top → base. `commit()` merges the top
overlay into the next layer (or the base state if it is the last layer).
`revert()` discards the top overlay.

World state is three tables:

- storage : (address, key) → bytes      contract storage slots
- code    : address → ContractCode      deployed contract (code name + immutables)
- nonces  : address → int               per-sender transaction counter

Intended usage
--------------
    j = StateJournal()
    j.begin()
    j.storage_set(addr, b"balance", b"123.45")
    j.commit()          # or j.revert() to discard

A transaction is applied inside one checkpoint, so a revert anywhere during
execution discards every storage write together with its events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

StorageKey = Tuple[bytes, bytes]


@dataclass(frozen=True)
class ContractCode:
    """A deployed contract: registered code name + ABI-encoded constructor args."""
    name: str
    init_args: bytes = b""


@dataclass
class _Overlay:
    storage: Dict[StorageKey, bytes] = field(default_factory=dict)
    code: Dict[bytes, ContractCode] = field(default_factory=dict)
    nonces: Dict[bytes, int] = field(default_factory=dict)

    def merge_into(self, other: "_Overlay") -> None:
        other.storage.update(self.storage)
        other.code.update(self.code)
        other.nonces.update(self.nonces)

    def is_empty(self) -> bool:
        return not (self.storage or self.code or self.nonces)


class JournalError(RuntimeError):
    pass


class StateJournal:
    """
    Copy-on-write world state with nested checkpoints.

    API highlights
    --------------
    - begin() / commit() / revert() / depth
    - storage_get(), storage_set()
    - get_code(), set_code()
    - get_nonce(), set_nonce()
    - snapshot() for tests and debugging (flattened committed view)
    """

    def __init__(self) -> None:
        self._base = _Overlay()
        self._stack: List[_Overlay] = []

    # -------------------------------------------------------------- checkpoints

    @property
    def depth(self) -> int:
        return len(self._stack)

    def begin(self) -> None:
        self._stack.append(_Overlay())

    def commit(self) -> None:
        if not self._stack:
            raise JournalError("commit() without begin()")
        top = self._stack.pop()
        top.merge_into(self._stack[-1] if self._stack else self._base)

    def revert(self) -> None:
        if not self._stack:
            raise JournalError("revert() without begin()")
        self._stack.pop()

    def _layers(self) -> Iterator[_Overlay]:
        yield from reversed(self._stack)
        yield self._base

    def _top(self) -> _Overlay:
        return self._stack[-1] if self._stack else self._base

    # -------------------------------------------------------------- storage

    def storage_get(self, address: bytes, key: bytes) -> Optional[bytes]:
        k = (bytes(address), bytes(key))
        for layer in self._layers():
            if k in layer.storage:
                return layer.storage[k]
        return None

    def storage_set(self, address: bytes, key: bytes, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("storage values must be bytes")
        self._top().storage[(bytes(address), bytes(key))] = bytes(value)

    # -------------------------------------------------------------- code

    def get_code(self, address: bytes) -> Optional[ContractCode]:
        a = bytes(address)
        for layer in self._layers():
            if a in layer.code:
                return layer.code[a]
        return None

    def set_code(self, address: bytes, code: ContractCode) -> None:
        if self.get_code(address) is not None:
            raise JournalError(f"code already deployed at 0x{bytes(address).hex()}")
        self._top().code[bytes(address)] = code

    # -------------------------------------------------------------- nonces

    def get_nonce(self, address: bytes) -> int:
        a = bytes(address)
        for layer in self._layers():
            if a in layer.nonces:
                return layer.nonces[a]
        return 0

    def set_nonce(self, address: bytes, nonce: int) -> None:
        if nonce < 0:
            raise ValueError("nonce must be ≥ 0")
        self._top().nonces[bytes(address)] = int(nonce)

    # -------------------------------------------------------------- views

    def snapshot(self) -> Dict[str, Dict]:
        """Flattened view including uncommitted layers (base first, top last)."""
        flat = _Overlay()
        self._base.merge_into(flat)
        for layer in self._stack:
            layer.merge_into(flat)
        return {"storage": dict(flat.storage), "code": dict(flat.code), "nonces": dict(flat.nonces)}


__all__ = ["ContractCode", "JournalError", "StateJournal", "StorageKey"]
