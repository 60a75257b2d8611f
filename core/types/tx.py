"""
Proofgate core/types/tx.py
==========================

Transaction model (unsigned/signed), canonical CBOR encoding, domain-separated
sign-bytes and tx hashes for the dev ledger.

Design highlights
-----------------
- **Kinds**: DEPLOY, CALL (enum `TxKind`).
  - DEPLOY carries a registered contract `code` name and ABI-encoded
    constructor args in `data`.
  - CALL carries the target `to` and ABI call data in `data`.
- **SignBytes**: canonical CBOR of ``{"domain": SIGN_DOMAIN, "tx": <tx map>}``.
- **Signatures**: Ed25519 (via `cryptography`); the signed envelope carries the
  32-byte public key so the node can recover and check the sender.
- **Address**: last 20 bytes of keccak256(public_key).
- **TxHash**: sha3_256(raw envelope), i.e. includes the signature.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from core.encoding.cbor import CBORError, dumps, loads
from core.utils.bytes import ADDRESS_LEN, ensure_len, to_hex
from core.utils.hash import keccak256, sha3_256

SIGN_DOMAIN = "proofgate/tx.sign/v1"
PUBKEY_LEN = 32
SIG_LEN = 64


class TxKind(IntEnum):
    DEPLOY = 1
    CALL = 2


class TxFormatError(ValueError):
    """Envelope or field shape is invalid."""


def address_from_public_key(public_key: bytes) -> bytes:
    return keccak256(ensure_len(public_key, PUBKEY_LEN, name="public_key"))[-ADDRESS_LEN:]


@dataclass(frozen=True)
class Tx:
    kind: TxKind
    chain_id: int
    nonce: int
    sender: bytes
    to: Optional[bytes] = None
    data: bytes = b""
    code: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TxKind(self.kind))
        object.__setattr__(self, "sender", ensure_len(self.sender, ADDRESS_LEN, name="Tx.sender"))
        if self.chain_id <= 0:
            raise TxFormatError("Tx.chain_id must be positive")
        if self.nonce < 0:
            raise TxFormatError("Tx.nonce must be ≥ 0")
        if not isinstance(self.data, (bytes, bytearray)):
            raise TxFormatError("Tx.data must be bytes")
        if self.kind is TxKind.CALL:
            if self.to is None:
                raise TxFormatError("CALL requires a target address")
            object.__setattr__(self, "to", ensure_len(self.to, ADDRESS_LEN, name="Tx.to"))
            if self.code is not None:
                raise TxFormatError("CALL must not carry contract code")
        else:
            if self.to is not None:
                raise TxFormatError("DEPLOY must not carry a target address")
            if not self.code:
                raise TxFormatError("DEPLOY requires a contract code name")

    def to_obj(self) -> Dict[str, Any]:
        obj: Dict[str, Any] = {
            "kind": int(self.kind),
            "chainId": int(self.chain_id),
            "nonce": int(self.nonce),
            "from": bytes(self.sender),
            "data": bytes(self.data),
        }
        if self.to is not None:
            obj["to"] = bytes(self.to)
        if self.code is not None:
            obj["code"] = self.code
        return obj

    @staticmethod
    def from_obj(o: Mapping[str, Any]) -> "Tx":
        if not isinstance(o, Mapping):
            raise TxFormatError("tx must be a map")
        try:
            return Tx(
                kind=TxKind(int(o["kind"])),
                chain_id=int(o["chainId"]),
                nonce=int(o["nonce"]),
                sender=bytes(o["from"]),
                to=bytes(o["to"]) if o.get("to") is not None else None,
                data=bytes(o.get("data", b"")),
                code=o.get("code"),
            )
        except (KeyError, TypeError, ValueError) as e:
            if isinstance(e, TxFormatError):
                raise
            raise TxFormatError(f"invalid tx map: {e}") from e

    def sign_bytes(self) -> bytes:
        return dumps({"domain": SIGN_DOMAIN, "tx": self.to_obj()})


@dataclass(frozen=True)
class SignedTx:
    tx: Tx
    public_key: bytes
    signature: bytes
    _raw: bytes = field(default=b"", repr=False, compare=False)

    def __post_init__(self) -> None:
        ensure_len(self.public_key, PUBKEY_LEN, name="SignedTx.public_key")
        ensure_len(self.signature, SIG_LEN, name="SignedTx.signature")
        if not self._raw:
            object.__setattr__(self, "_raw", dumps(self._envelope()))

    def _envelope(self) -> Dict[str, Any]:
        return {
            "tx": self.tx.to_obj(),
            "pubkey": bytes(self.public_key),
            "sig": bytes(self.signature),
        }

    @property
    def raw(self) -> bytes:
        return self._raw

    @property
    def hash(self) -> bytes:
        return sha3_256(self._raw)

    def verify_signature(self) -> bool:
        """Signature valid for the sign-bytes *and* the key derives `tx.sender`."""
        if address_from_public_key(self.public_key) != self.tx.sender:
            return False
        try:
            Ed25519PublicKey.from_public_bytes(bytes(self.public_key)).verify(
                bytes(self.signature), self.tx.sign_bytes()
            )
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def decode(raw: bytes) -> "SignedTx":
        try:
            env = loads(raw)
        except CBORError as e:
            raise TxFormatError(str(e)) from e
        if not isinstance(env, dict) or set(env) != {"tx", "pubkey", "sig"}:
            raise TxFormatError("signed tx envelope must be a map of {tx, pubkey, sig}")
        try:
            stx = SignedTx(
                tx=Tx.from_obj(env["tx"]),
                public_key=bytes(env["pubkey"]),
                signature=bytes(env["sig"]),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, TxFormatError):
                raise
            raise TxFormatError(f"invalid signed tx: {e}") from e
        if stx.raw != bytes(raw):
            raise TxFormatError("signed tx envelope is not canonically encoded")
        return stx

    def summary(self) -> Dict[str, Any]:
        return {
            "hash": to_hex(self.hash),
            "kind": self.tx.kind.name,
            "from": to_hex(self.tx.sender),
            "to": to_hex(self.tx.to) if self.tx.to else None,
            "nonce": self.tx.nonce,
            "code": self.tx.code,
        }


__all__ = [
    "SIGN_DOMAIN",
    "TxKind",
    "TxFormatError",
    "Tx",
    "SignedTx",
    "address_from_public_key",
]
