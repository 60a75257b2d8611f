"""
proofgate_sdk.contracts.client
==============================

A small contract client that:
- Encodes function calls from a JSON ABI (core.encoding.abi)
- Runs read-only calls through `state.call` and decodes return values
- Builds, signs and sends state-changing transactions, then awaits receipts

Example
-------
    from proofgate_sdk.rpc.http import RpcClient
    from proofgate_sdk.wallet.signer import Signer
    from proofgate_sdk.contracts.client import ContractClient
    from contracts.balance_verifier.abi import BALANCE_VERIFIER_ABI

    with RpcClient("http://127.0.0.1:8545") as rpc:
        c = ContractClient(rpc, "0x…", BALANCE_VERIFIER_ABI, chain_id=1337)
        print(c.call("balance"))
        receipt = c.send("submitBalance", [journal, seal], signer=Signer.from_hex(key))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from core.encoding import abi
from core.utils.bytes import format_address, from_hex, parse_address, to_hex

from ..errors import AbiError
from ..rpc.http import RpcClient
from ..tx import send as tx_send
from ..wallet.signer import Signer


@dataclass
class ContractClient:
    rpc: RpcClient
    address: str
    abi: Sequence[abi.AbiEntry]
    chain_id: int
    confirmation_timeout: float = 60.0
    poll_interval: float = 0.25
    _address_bytes: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            self._address_bytes = parse_address(self.address)
        except ValueError as e:
            raise AbiError(f"invalid contract address {self.address!r}: {e}") from e
        self.address = format_address(self._address_bytes)

    # --- encoding ----------------------------------------------------------

    def _fn(self, name: str) -> abi.AbiEntry:
        try:
            return abi.find(self.abi, name)
        except abi.AbiCodecError as e:
            raise AbiError(str(e), function=name) from e

    def encode(self, fn: str, args: Sequence[Any] = ()) -> bytes:
        entry = self._fn(fn)
        try:
            return abi.encode_call(entry, list(args))
        except abi.AbiCodecError as e:
            raise AbiError(str(e), function=fn) from e

    # --- reads ---------------------------------------------------------------

    def simulate(self, fn: str, args: Sequence[Any] = (), *, sender: Optional[bytes] = None) -> bytes:
        """Run `fn` read-only and return the raw return data. Reverts raise RpcError(code=3)."""
        call: Dict[str, Any] = {"to": self.address, "data": to_hex(self.encode(fn, args))}
        if sender is not None:
            call["from"] = to_hex(sender)
        return from_hex(self.rpc.call("state.call", [call]))

    def call(self, fn: str, args: Sequence[Any] = (), *, sender: Optional[bytes] = None) -> Any:
        """Read-only call; a single output is unwrapped, several come back as a tuple."""
        out = self.simulate(fn, args, sender=sender)
        entry = self._fn(fn)
        try:
            values = abi.decode_outputs(entry, out)
        except abi.AbiCodecError as e:
            raise AbiError(f"cannot decode return data: {e}", function=fn) from e
        if len(values) == 1:
            return values[0]
        return values or None

    # --- writes --------------------------------------------------------------

    def send(self, fn: str, args: Sequence[Any] = (), *, signer: Signer) -> Dict[str, Any]:
        """Sign and submit a CALL of `fn`; returns the mined receipt (status may be "revert")."""
        stx = tx_send.build_and_sign(
            signer,
            chain_id=self.chain_id,
            nonce=tx_send.get_nonce(self.rpc, signer.address),
            to=self._address_bytes,
            data=self.encode(fn, args),
        )
        return tx_send.send_and_wait(
            self.rpc,
            stx,
            timeout_s=self.confirmation_timeout,
            poll_interval_s=self.poll_interval,
        )


__all__ = ["ContractClient"]
