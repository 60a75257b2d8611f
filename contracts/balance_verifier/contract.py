# contracts/balance_verifier/contract.py
#
# BalanceVerifier: accepts a web-proof journal plus a zk seal, checks the
# journal against the deployment's expectations, delegates the cryptographic
# check to a receipt verifier contract, and only then records the balance.
#
# submitBalance(journalData, seal), fail-fast in this exact order:
#
#   1. decode journalData as (bytes32,string,string,uint256,bytes32,string)
#      → bare revert (empty revert data) if malformed
#   2. notaryKeyFingerprint == expected          else InvalidNotaryKeyFingerprint()
#   3. method == "GET" (exact, case-sensitive)   else InvalidUrl()
#   4. queriesHash == expected                   else InvalidQueriesHash()
#   5. url starts with expectedUrl (UTF-8 bytes) else InvalidUrl()
#   6. balance non-empty                         else InvalidBalance()
#   7. verifier.verify(seal, imageId, sha256(journalData))
#      → any failure or fault becomes ZKProofVerificationFailed()
#   8. store balance, emit BalanceVerified(balance, url, timestamp, blockNumber)
#
# Steps 1-6 are the pure function `validate_journal`; nothing is written
# before step 8, so a failed submission leaves state and logs untouched.
# Method and URL mismatches deliberately share InvalidUrl().
#
# Storage layout:
#   b"balance" → UTF-8 bytes of the last verified balance (absent ⇒ "")

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.encoding import abi
from core.types.journal import Journal, JournalDecodeError, decode_journal
from core.utils.bytes import parse_address
from execution.errors import ContractError, Revert
from execution.runtime.contracts import Contract, external, register_contract
from zk.verifiers.risc0 import journal_digest

from ..mock_verifier.abi import VERIFIER_ABI
from .abi import BALANCE_VERIFIER_ABI

log = logging.getLogger(__name__)

CODE_NAME = "BalanceVerifier"
REQUIRED_METHOD = "GET"
BALANCE_KEY = b"balance"

BALANCE_VERIFIED = abi.find(BALANCE_VERIFIER_ABI, "BalanceVerified", "event")
_VERIFY = abi.find(VERIFIER_ABI, "verify")


# ────────────────────────────────────────────────────────────────────────────────
# Errors
# ────────────────────────────────────────────────────────────────────────────────


class InvalidNotaryKeyFingerprint(ContractError):
    signature = "InvalidNotaryKeyFingerprint()"


class InvalidQueriesHash(ContractError):
    signature = "InvalidQueriesHash()"


class InvalidUrl(ContractError):
    signature = "InvalidUrl()"


class InvalidBalance(ContractError):
    signature = "InvalidBalance()"


class ZKProofVerificationFailed(ContractError):
    signature = "ZKProofVerificationFailed()"


class MalformedJournal(Revert):
    """Journal bytes do not decode; reverts without revert data."""

    def __init__(self, detail: str):
        super().__init__(f"malformed journal: {detail}", return_data=b"")


# ────────────────────────────────────────────────────────────────────────────────
# Configuration & validation
# ────────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DeploymentConfig:
    verifier: bytes
    image_id: bytes
    notary_key_fingerprint: bytes
    queries_hash: bytes
    expected_url: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "verifier", parse_address(self.verifier, name="verifier"))
        for name in ("image_id", "notary_key_fingerprint", "queries_hash"):
            if len(getattr(self, name)) != 32:
                raise ValueError(f"{name} must be 32 bytes")


def _has_prefix(url: str, prefix: str) -> bool:
    u = url.encode("utf-8")
    p = prefix.encode("utf-8")
    return len(u) >= len(p) and u[: len(p)] == p


def validate_journal(journal_data: bytes, config: DeploymentConfig) -> Journal:
    """
    Decode `journal_data` and check it against `config`.

    Returns the decoded Journal, or raises the first failing check's error
    (MalformedJournal or one of the ContractError kinds above).
    """
    try:
        journal = decode_journal(journal_data)
    except JournalDecodeError as e:
        raise MalformedJournal(str(e)) from e

    if journal.notary_key_fingerprint != config.notary_key_fingerprint:
        raise InvalidNotaryKeyFingerprint()
    if journal.method != REQUIRED_METHOD:
        raise InvalidUrl()
    if journal.queries_hash != config.queries_hash:
        raise InvalidQueriesHash()
    if not _has_prefix(journal.url, config.expected_url):
        raise InvalidUrl()
    if len(journal.balance) == 0:
        raise InvalidBalance()
    return journal


# ────────────────────────────────────────────────────────────────────────────────
# Contract
# ────────────────────────────────────────────────────────────────────────────────


@register_contract(CODE_NAME)
class BalanceVerifier(Contract):
    ABI = BALANCE_VERIFIER_ABI

    def __init__(self, ctx, verifier, image_id, notary_key_fingerprint, queries_hash, expected_url):
        super().__init__(ctx)
        try:
            self.config = DeploymentConfig(
                verifier=verifier,
                image_id=bytes(image_id),
                notary_key_fingerprint=bytes(notary_key_fingerprint),
                queries_hash=bytes(queries_hash),
                expected_url=expected_url,
            )
        except ValueError as e:
            raise Revert(f"invalid deployment config: {e}") from e

    @external("submitBalance")
    def submit_balance(self, journal_data: bytes, seal: bytes) -> None:
        journal = validate_journal(journal_data, self.config)
        self._verify_seal(seal, journal_digest(journal_data))

        self.ctx.storage_set(BALANCE_KEY, journal.balance.encode("utf-8"))
        self.ctx.emit(
            BALANCE_VERIFIED,
            [journal.balance, journal.url, journal.timestamp, self.ctx.block.number],
        )
        log.info("balance verified: %r (block %d)", journal.balance, self.ctx.block.number)

    def _verify_seal(self, seal: bytes, digest: bytes) -> None:
        try:
            self.ctx.call(self.config.verifier, _VERIFY, [bytes(seal), self.config.image_id, digest])
        except Exception as e:
            # cause stays in the node log; callers only ever see the one kind
            log.warning("receipt verification failed: %s", e)
            raise ZKProofVerificationFailed() from e

    @external("balance", view=True)
    def balance(self) -> str:
        raw = self.ctx.storage_get(BALANCE_KEY)
        return raw.decode("utf-8") if raw else ""


__all__ = [
    "CODE_NAME",
    "BALANCE_KEY",
    "DeploymentConfig",
    "validate_journal",
    "BalanceVerifier",
    "MalformedJournal",
    "InvalidNotaryKeyFingerprint",
    "InvalidQueriesHash",
    "InvalidUrl",
    "InvalidBalance",
    "ZKProofVerificationFailed",
]
