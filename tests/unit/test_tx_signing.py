"""
Signed transaction envelope tests (Ed25519 over canonical CBOR sign-bytes).
"""
from __future__ import annotations

import dataclasses

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from core.types.tx import SignedTx, Tx, TxFormatError, TxKind, address_from_public_key


def _keypair():
    sk = Ed25519PrivateKey.generate()
    pk = sk.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return sk, pk


def _signed(sk, pk, **kw) -> SignedTx:
    fields = dict(
        kind=TxKind.CALL,
        chain_id=1337,
        nonce=0,
        sender=address_from_public_key(pk),
        to=b"\x42" * 20,
        data=b"\x01\x02",
    )
    fields.update(kw)
    tx = Tx(**fields)
    return SignedTx(tx=tx, public_key=pk, signature=sk.sign(tx.sign_bytes()))


def test_sign_bytes_are_deterministic():
    _, pk = _keypair()
    a = Tx(kind=TxKind.CALL, chain_id=1, nonce=3, sender=address_from_public_key(pk), to=b"\x01" * 20)
    b = Tx(kind=TxKind.CALL, chain_id=1, nonce=3, sender=address_from_public_key(pk), to=b"\x01" * 20)
    assert a.sign_bytes() == b.sign_bytes()
    assert dataclasses.replace(a, nonce=4).sign_bytes() != a.sign_bytes()


def test_valid_signature_roundtrips_through_raw():
    sk, pk = _keypair()
    stx = _signed(sk, pk)
    assert stx.verify_signature()
    back = SignedTx.decode(stx.raw)
    assert back == stx
    assert back.hash == stx.hash


def test_signature_from_another_key_fails():
    sk, pk = _keypair()
    other_sk, _ = _keypair()
    stx = _signed(sk, pk)
    forged = SignedTx(tx=stx.tx, public_key=pk, signature=other_sk.sign(stx.tx.sign_bytes()))
    assert not forged.verify_signature()


def test_sender_must_match_public_key():
    sk, pk = _keypair()
    stx = _signed(sk, pk, sender=b"\x99" * 20)
    assert not stx.verify_signature()


def test_deploy_requires_code_and_no_target():
    _, pk = _keypair()
    with pytest.raises(TxFormatError):
        Tx(kind=TxKind.DEPLOY, chain_id=1, nonce=0, sender=address_from_public_key(pk))
    with pytest.raises(TxFormatError):
        Tx(kind=TxKind.DEPLOY, chain_id=1, nonce=0, sender=address_from_public_key(pk),
           to=b"\x01" * 20, code="X")


@pytest.mark.parametrize("raw", [b"", b"\xa0", b"not cbor at all"])
def test_garbage_envelopes_are_rejected(raw):
    with pytest.raises(TxFormatError):
        SignedTx.decode(raw)
