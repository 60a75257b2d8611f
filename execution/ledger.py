"""
execution.ledger - in-process dev ledger: admission, pending pool, blocks, receipts.

The ledger is the single writer of world state. Every mutation (admission,
block production) happens under one re-entrant lock, so transaction
application is serialized and ledger inclusion order equals application
order. Read-only calls take the same lock and run inside an always-reverted
checkpoint.

Admission (`send_raw`) rejects, before anything is queued:
  - undecodable envelopes                 → InvalidTx(MALFORMED)
  - foreign chain ids                     → InvalidTx(CHAIN_ID_MISMATCH)
  - bad signatures / sender mismatch      → InvalidTx(BAD_SIGNATURE)
  - stale or gapped nonces                → InvalidTx(NONCE_TOO_LOW | NONCE_GAP)
  - duplicates                            → InvalidTx(DUPLICATE)
  - deploys of unregistered code names    → InvalidTx(UNKNOWN_CODE)

With `automine=True` (the default) every accepted transaction is mined into
its own block immediately; otherwise call `mine()` (or run the RPC node with
a block time) to drain the pending pool.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.encoding.cbor import dumps as cbor_dumps
from core.types.tx import SignedTx, TxFormatError, TxKind
from core.utils.bytes import ZERO_ADDRESS, to_hex
from core.utils.hash import ZERO32, sha3_256

from .errors import InvalidTx
from .gas.intrinsic import DEFAULT_SCHEDULE, GasSchedule
from .receipts.builder import build_receipt
from .runtime.contracts import get_contract_class
from .runtime.env import BlockEnv
from .runtime.executor import apply_tx
from .runtime.executor import call as exec_call
from .state.journal import ContractCode, StateJournal
from .types.result import ApplyResult

log = logging.getLogger(__name__)

DEFAULT_CHAIN_ID = 1337


@dataclass(frozen=True)
class Block:
    height: int
    timestamp: int
    parent_hash: bytes
    tx_hashes: Tuple[bytes, ...] = field(default_factory=tuple)

    @property
    def hash(self) -> bytes:
        return sha3_256(
            cbor_dumps(
                {
                    "height": self.height,
                    "timestamp": self.timestamp,
                    "parent": self.parent_hash,
                    "txs": list(self.tx_hashes),
                }
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.height,
            "hash": to_hex(self.hash),
            "parentHash": to_hex(self.parent_hash),
            "timestamp": self.timestamp,
            "transactions": [to_hex(h) for h in self.tx_hashes],
        }


class Ledger:
    def __init__(
        self,
        chain_id: int = DEFAULT_CHAIN_ID,
        *,
        automine: bool = True,
        clock: Callable[[], float] = time.time,
        schedule: GasSchedule = DEFAULT_SCHEDULE,
    ) -> None:
        if chain_id <= 0:
            raise ValueError("chain_id must be positive")
        self.chain_id = int(chain_id)
        self.automine = automine
        self._clock = clock
        self._schedule = schedule
        self._lock = threading.RLock()
        self._state = StateJournal()
        self._blocks: List[Block] = [Block(height=0, timestamp=int(clock()), parent_hash=ZERO32)]
        self._pending: List[SignedTx] = []
        self._receipts: Dict[bytes, Dict[str, Any]] = {}

    # ------------------------------------------------------------------ chain

    @property
    def head(self) -> Block:
        with self._lock:
            return self._blocks[-1]

    def get_block(self, height: int) -> Optional[Block]:
        with self._lock:
            if 0 <= height < len(self._blocks):
                return self._blocks[height]
            return None

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    # ------------------------------------------------------------------ state

    def nonce(self, address: bytes) -> int:
        with self._lock:
            return self._state.get_nonce(address)

    def pending_nonce(self, address: bytes) -> int:
        with self._lock:
            queued = sum(1 for p in self._pending if p.tx.sender == bytes(address))
            return self._state.get_nonce(address) + queued

    def code_at(self, address: bytes) -> Optional[ContractCode]:
        with self._lock:
            return self._state.get_code(address)

    def storage_at(self, address: bytes, key: bytes) -> Optional[bytes]:
        with self._lock:
            return self._state.storage_get(address, key)

    def _next_env(self) -> BlockEnv:
        head = self._blocks[-1]
        return BlockEnv(
            number=head.height + 1,
            timestamp=max(int(self._clock()), head.timestamp),
            chain_id=self.chain_id,
        )

    def call(self, to: bytes, data: bytes, *, sender: Optional[bytes] = None) -> ApplyResult:
        """Read-only execution against current state in the next block's environment."""
        with self._lock:
            return exec_call(
                self._state,
                self._next_env(),
                sender=bytes(sender) if sender else ZERO_ADDRESS,
                to=bytes(to),
                data=bytes(data),
                schedule=self._schedule,
            )

    # ------------------------------------------------------------------ txs

    def send_raw(self, raw: bytes) -> bytes:
        try:
            stx = SignedTx.decode(raw)
        except TxFormatError as e:
            raise InvalidTx(f"malformed transaction: {e}", reason="MALFORMED") from e

        with self._lock:
            self._admit(stx)
            self._pending.append(stx)
            log.info("accepted tx 0x%s (%s nonce=%d)", stx.hash.hex(), stx.tx.kind.name, stx.tx.nonce)
            if self.automine:
                self.mine()
        return stx.hash

    def _admit(self, stx: SignedTx) -> None:
        tx = stx.tx
        if tx.chain_id != self.chain_id:
            self._reject(stx, f"chain id {tx.chain_id} != {self.chain_id}", "CHAIN_ID_MISMATCH")
        if not stx.verify_signature():
            self._reject(stx, "signature does not verify for sender", "BAD_SIGNATURE")
        if stx.hash in self._receipts or any(p.hash == stx.hash for p in self._pending):
            self._reject(stx, "transaction already known", "DUPLICATE")
        expected = self.pending_nonce(tx.sender)
        if tx.nonce < expected:
            self._reject(stx, f"nonce {tx.nonce} too low (expected {expected})", "NONCE_TOO_LOW")
        if tx.nonce > expected:
            self._reject(stx, f"nonce {tx.nonce} ahead of {expected}", "NONCE_GAP")
        if tx.kind is TxKind.DEPLOY:
            try:
                get_contract_class(tx.code or "")
            except InvalidTx:
                log.warning("rejected tx 0x%s: unknown code %r", stx.hash.hex(), tx.code)
                raise

    @staticmethod
    def _reject(stx: SignedTx, message: str, reason: str) -> None:
        log.warning("rejected tx 0x%s: %s", stx.hash.hex(), message)
        raise InvalidTx(message, reason=reason, data={"hash": to_hex(stx.hash)})

    def mine(self) -> Block:
        """Apply the pending pool in order and seal the resulting block."""
        with self._lock:
            env = self._next_env()
            parent = self._blocks[-1]
            included: List[Tuple[SignedTx, ApplyResult]] = []
            for stx in self._pending:
                try:
                    result = apply_tx(self._state, stx, env, schedule=self._schedule)
                except InvalidTx as e:
                    log.warning("dropping tx 0x%s at inclusion: %s", stx.hash.hex(), e)
                    continue
                included.append((stx, result))
            self._pending.clear()

            block = Block(
                height=env.number,
                timestamp=env.timestamp,
                parent_hash=parent.hash,
                tx_hashes=tuple(stx.hash for stx, _ in included),
            )
            block_hash = block.hash
            for i, (stx, result) in enumerate(included):
                self._receipts[stx.hash] = build_receipt(
                    stx, result, block_number=block.height, block_hash=block_hash, index=i
                )
            self._blocks.append(block)
            log.info("mined block %d with %d tx(s)", block.height, len(included))
            return block

    def receipt(self, tx_hash: bytes) -> Optional[Dict[str, Any]]:
        with self._lock:
            r = self._receipts.get(bytes(tx_hash))
            return dict(r) if r is not None else None


__all__ = ["Block", "Ledger", "DEFAULT_CHAIN_ID"]
