"""
proofgate_sdk.wallet.signer
===========================

Ed25519 signer for dev-ledger transactions.

- Keys come from a 32-byte seed (hex, with or without 0x), e.g. the
  `PRIVATE_KEY` environment variable, or are generated fresh.
- Addresses are the last 20 bytes of keccak256(public_key), matching
  `core.types.tx.address_from_public_key`.
- `sign_tx` signs the transaction's canonical sign-bytes and returns the
  envelope ready for `tx.sendRawTransaction`.
"""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (Encoding,
                                                          NoEncryption,
                                                          PrivateFormat,
                                                          PublicFormat)

from core.types.tx import SignedTx, Tx, address_from_public_key
from core.utils.bytes import from_hex, to_hex

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Signer:
    private_key: Ed25519PrivateKey

    @classmethod
    def generate(cls) -> "Signer":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "Signer":
        if len(seed) != 32:
            raise ConfigurationError(f"private key seed must be 32 bytes, got {len(seed)}")
        return cls(Ed25519PrivateKey.from_private_bytes(bytes(seed)))

    @classmethod
    def from_hex(cls, value: str) -> "Signer":
        try:
            seed = from_hex(value)
        except ValueError as e:
            raise ConfigurationError(f"private key is not valid hex: {e}") from e
        return cls.from_seed(seed)

    @property
    def public_key(self) -> bytes:
        return self.private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    @property
    def address(self) -> bytes:
        return address_from_public_key(self.public_key)

    @property
    def address_hex(self) -> str:
        return to_hex(self.address)

    def seed_hex(self) -> str:
        raw = self.private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        return to_hex(raw)

    def sign_tx(self, tx: Tx) -> SignedTx:
        if tx.sender != self.address:
            raise ValueError("transaction sender does not match signer address")
        return SignedTx(tx=tx, public_key=self.public_key, signature=self.private_key.sign(tx.sign_bytes()))

    def __repr__(self) -> str:
        return f"Signer(address={self.address_hex})"


__all__ = ["Signer"]
