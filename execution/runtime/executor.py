"""
execution.runtime.executor - apply one transaction atomically; run read-only calls.

apply_tx
--------
1. Check the nonce against state and bump it (the bump survives a revert).
2. Open a checkpoint and run the DEPLOY or CALL inside it.
3. Success: commit storage/code writes together with the buffered events.
   Revert:  discard the checkpoint; the receipt carries the revert data and
   no logs.

call
----
Executes against the current state inside a checkpoint that is *always*
reverted, so simulations never change storage, code, nonces or logs.

Unexpected exceptions raised by contract code (bugs, not reverts) are logged
and treated as a bare revert so a faulty contract cannot wedge block
production.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from core.encoding.cbor import dumps as _cbor_dumps
from core.types.tx import SignedTx, TxKind
from core.utils.hash import keccak256

from ..errors import ExecError, InvalidTx, Revert
from ..gas.intrinsic import DEFAULT_SCHEDULE, GasSchedule, intrinsic_gas
from ..state.journal import ContractCode, StateJournal
from ..types.events import LogEvent
from ..types.result import ApplyResult
from ..types.status import TxStatus
from .contracts import get_contract_class, instantiate, load_contract
from .dispatcher import dispatch
from .env import BlockEnv, CallContext, GasCounter

log = logging.getLogger(__name__)


def contract_address(sender: bytes, nonce: int) -> bytes:
    """Deterministic address for a contract deployed by `sender` at `nonce`."""
    return keccak256(_cbor_dumps([bytes(sender), int(nonce)]))[-20:]


def _run_frame(
    state: StateJournal,
    block: BlockEnv,
    *,
    sender: bytes,
    to: Optional[bytes],
    data: bytes,
    code: Optional[str],
    nonce: int,
    gas: GasCounter,
) -> Tuple[bytes, Optional[bytes], List[LogEvent]]:
    events: List[LogEvent] = []
    if code is not None:
        cls = get_contract_class(code)
        address = contract_address(sender, nonce)
        ctx = CallContext(state=state, block=block, address=address, caller=sender,
                          origin=sender, gas=gas, events=events)
        instantiate(cls, ctx, data)
        state.set_code(address, ContractCode(name=code, init_args=bytes(data)))
        return b"", address, events

    assert to is not None
    ctx = CallContext(state=state, block=block, address=to, caller=sender,
                      origin=sender, gas=gas, events=events)
    out = dispatch(load_contract(ctx), data)
    return out, None, events


def _revert_data(err: BaseException) -> bytes:
    return getattr(err, "return_data", b"") if isinstance(err, Revert) else b""


def apply_tx(
    state: StateJournal,
    stx: SignedTx,
    block: BlockEnv,
    *,
    schedule: GasSchedule = DEFAULT_SCHEDULE,
) -> ApplyResult:
    tx = stx.tx
    current = state.get_nonce(tx.sender)
    if tx.nonce != current:
        raise InvalidTx(
            f"nonce {tx.nonce} != expected {current}",
            reason="NONCE_TOO_LOW" if tx.nonce < current else "NONCE_GAP",
        )
    if tx.kind is TxKind.DEPLOY:
        get_contract_class(tx.code or "")

    state.set_nonce(tx.sender, current + 1)
    gas = GasCounter(schedule=schedule)
    gas.charge(intrinsic_gas(tx.data, deploy=tx.kind is TxKind.DEPLOY, schedule=schedule))

    state.begin()
    try:
        out, created, events = _run_frame(
            state, block,
            sender=tx.sender, to=tx.to, data=tx.data, code=tx.code, nonce=tx.nonce, gas=gas,
        )
    except ExecError as e:
        state.revert()
        log.debug("tx 0x%s reverted: %s", stx.hash.hex(), e)
        return ApplyResult(status=TxStatus.REVERT, gas_used=gas.used, revert_data=_revert_data(e))
    except Exception:
        state.revert()
        log.exception("contract fault while applying tx 0x%s", stx.hash.hex())
        return ApplyResult(status=TxStatus.REVERT, gas_used=gas.used)
    state.commit()
    return ApplyResult(
        status=TxStatus.SUCCESS,
        gas_used=gas.used,
        logs=tuple(events),
        return_data=out,
        contract_address=created,
    )


def call(
    state: StateJournal,
    block: BlockEnv,
    *,
    sender: bytes,
    to: bytes,
    data: bytes,
    schedule: GasSchedule = DEFAULT_SCHEDULE,
) -> ApplyResult:
    """
    Read-only execution. Returns SUCCESS with `return_data` or REVERT with
    `revert_data`; state is left untouched either way.
    """
    gas = GasCounter(schedule=schedule)
    gas.charge(intrinsic_gas(bytes(data), deploy=False, schedule=schedule))
    state.begin()
    try:
        out, _, events = _run_frame(
            state, block,
            sender=sender, to=to, data=bytes(data), code=None,
            nonce=state.get_nonce(sender), gas=gas,
        )
    except ExecError as e:
        return ApplyResult(status=TxStatus.REVERT, gas_used=gas.used, revert_data=_revert_data(e))
    except Exception:
        log.exception("contract fault during call to 0x%s", bytes(to).hex())
        return ApplyResult(status=TxStatus.REVERT, gas_used=gas.used)
    finally:
        state.revert()
    return ApplyResult(status=TxStatus.SUCCESS, gas_used=gas.used, logs=tuple(events), return_data=out)


__all__ = ["apply_tx", "call", "contract_address"]
