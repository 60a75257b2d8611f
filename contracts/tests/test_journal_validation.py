"""
Pure journal validation: decode + the five checks, in their fixed order.
No ledger involved; see test_balance_verifier.py for the on-ledger flow.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from contracts.balance_verifier import (DeploymentConfig, InvalidBalance,
                                        InvalidNotaryKeyFingerprint,
                                        InvalidQueriesHash, InvalidUrl,
                                        MalformedJournal, validate_journal)
from core.types.journal import Journal, encode_journal

FP = bytes.fromhex("11" * 32)
QH = bytes.fromhex("22" * 32)
PREFIX = "https://api.example.com/v1/balance"


def _config(**kw) -> DeploymentConfig:
    fields = dict(
        verifier=b"\x09" * 20,
        image_id=bytes.fromhex("ab" * 32),
        notary_key_fingerprint=FP,
        queries_hash=QH,
        expected_url=PREFIX,
    )
    fields.update(kw)
    return DeploymentConfig(**fields)


def _raw(**kw) -> bytes:
    fields = dict(
        notary_key_fingerprint=FP,
        method="GET",
        url=PREFIX + "?account=42",
        timestamp=1_700_000_000,
        queries_hash=QH,
        balance="123.45",
    )
    fields.update(kw)
    return encode_journal(Journal(**fields))


def test_accepts_matching_journal():
    j = validate_journal(_raw(), _config())
    assert j.balance == "123.45"
    assert j.url == PREFIX + "?account=42"
    assert j.timestamp == 1_700_000_000


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"notary_key_fingerprint": b"\x00" * 32}, InvalidNotaryKeyFingerprint),
        ({"method": "POST"}, InvalidUrl),
        ({"method": "get"}, InvalidUrl),
        ({"method": ""}, InvalidUrl),
        ({"queries_hash": b"\x00" * 32}, InvalidQueriesHash),
        ({"url": "https://evil.example.com/v1/balance"}, InvalidUrl),
        ({"url": PREFIX[:-1]}, InvalidUrl),
        ({"url": ""}, InvalidUrl),
        ({"balance": ""}, InvalidBalance),
    ],
)
def test_single_mismatch_yields_its_error(overrides, error):
    with pytest.raises(error):
        validate_journal(_raw(**overrides), _config())


@pytest.mark.parametrize(
    "overrides, error",
    [
        # fingerprint is checked before everything else
        (
            {"notary_key_fingerprint": b"\x00" * 32, "method": "POST", "queries_hash": b"\x00" * 32,
             "url": "x", "balance": ""},
            InvalidNotaryKeyFingerprint,
        ),
        # method before queries hash
        ({"method": "POST", "queries_hash": b"\x00" * 32}, InvalidUrl),
        # queries hash before url prefix
        ({"queries_hash": b"\x00" * 32, "url": "x"}, InvalidQueriesHash),
        # url prefix before balance
        ({"url": "x", "balance": ""}, InvalidUrl),
    ],
)
def test_first_failing_check_wins(overrides, error):
    with pytest.raises(error):
        validate_journal(_raw(**overrides), _config())


def test_url_equal_to_prefix_is_accepted():
    assert validate_journal(_raw(url=PREFIX), _config()).url == PREFIX


def test_empty_expected_url_accepts_any_url():
    validate_journal(_raw(url="anything at all"), _config(expected_url=""))


def test_prefix_is_compared_on_utf8_bytes():
    cfg = _config(expected_url="https://api.example.com/é")
    validate_journal(_raw(url="https://api.example.com/é/x"), cfg)
    with pytest.raises(InvalidUrl):
        validate_journal(_raw(url="https://api.example.com/e/x"), cfg)


def test_whitespace_balance_is_not_empty():
    assert validate_journal(_raw(balance=" "), _config()).balance == " "


@pytest.mark.parametrize(
    "raw",
    [b"", b"\x00" * 31, _raw() + b"\x00", _raw()[:-1]],
)
def test_undecodable_journal_is_malformed(raw):
    with pytest.raises(MalformedJournal) as ei:
        validate_journal(raw, _config())
    assert ei.value.return_data == b""


def test_malformed_journal_takes_precedence():
    with pytest.raises(MalformedJournal):
        validate_journal(b"not a journal", _config(notary_key_fingerprint=b"\x00" * 32))


def test_deployment_config_rejects_bad_lengths():
    with pytest.raises(ValueError):
        _config(image_id=b"\x00" * 31)
    with pytest.raises(ValueError):
        _config(verifier=b"\x00" * 19)


def test_deployment_config_accepts_hex_verifier():
    assert _config(verifier="0x" + "09" * 20).verifier == b"\x09" * 20


@settings(max_examples=75, deadline=None)
@given(suffix=st.text(max_size=40), balance=st.text(min_size=1, max_size=40))
def test_any_suffix_and_non_empty_balance_pass(suffix, balance):
    j = validate_journal(_raw(url=PREFIX + suffix, balance=balance), _config())
    assert j.url == PREFIX + suffix
    assert j.balance == balance


@settings(max_examples=75, deadline=None)
@given(url=st.text(max_size=60))
def test_url_passes_iff_it_starts_with_prefix(url):
    raw = _raw(url=url)
    if url.encode("utf-8").startswith(PREFIX.encode("utf-8")):
        validate_journal(raw, _config())
    else:
        with pytest.raises(InvalidUrl):
            validate_journal(raw, _config())
