"""
proofgate_sdk.submit
====================

Submit a proof bundle to a deployed BalanceVerifier.

    result = submit_proof(SubmitOptions(network="devnet", proof_file="proof.json"))
    print(result.balance)

Flow (sequential, no automatic retry):

1. load      read the bundle (InvalidProofFile before any network use)
2. resolve   explicit contract address, else deployments/<network>.json
3. diagnose  decode the journal and log its fields; a decode failure is
             logged as JournalDecodeFailure and the flow continues
4. simulate  `state.call` submitBalance from the caller's address; a revert
             becomes ValidationRejected(kind, "simulate") for the validator's
             own errors, UnrecognizedRevert otherwise
5. submit    sign + `tx.sendRawTransaction` with the same arguments; a node
             that already holds this exact tx (lost response, resent) counts
             as accepted
6. confirm   poll for the receipt until the confirmation timeout
             (ConfirmationTimeout); a reverted receipt is decoded like (4)
             with stage "submit"
7. read      `balance()` after inclusion, reported in SubmitResult

Node refusals without revert data (nonce, signature, chain id) and transport
faults surface as NetworkFailure.

The RPC connection opened here is closed on every exit path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional

from contracts.balance_verifier.abi import BALANCE_VERIFIER_ABI, VALIDATOR_ERRORS
from core import logging as clog
from core.types.journal import Journal, JournalDecodeError, decode_journal
from core.utils.bytes import format_address, parse_address

from .config import SDKConfig
from .contracts.client import ContractClient
from .contracts.revert import decode_revert, get_revert_data
from .deployments import load_deployment
from .errors import (ConfigurationError, JournalDecodeFailure, NetworkFailure, ProofgateSdkError,
                     RpcError, UnrecognizedRevert, ValidationRejected)
from .proofs.bundle import ProofBundle, load_proof_bundle
from .rpc.http import RpcClient
from .tx import send as tx_send
from .wallet.signer import Signer

log = logging.getLogger(__name__)

SUBMIT_FN = "submitBalance"


@dataclass(frozen=True)
class SubmitOptions:
    network: str
    proof_file: Path | str
    contract_address: Optional[str] = None


@dataclass(frozen=True)
class SubmitResult:
    transaction_hash: str
    block_number: int
    gas_used: int
    balance: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionHash": self.transaction_hash,
            "blockNumber": self.block_number,
            "gasUsed": self.gas_used,
            "balance": self.balance,
        }


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------


def resolve_contract_address(cfg: SDKConfig, contract_address: Optional[str] = None) -> str:
    candidate = contract_address
    if not candidate:
        record = load_deployment(cfg.network, cfg.deployments_dir)
        if record is None:
            raise ConfigurationError(
                f"contract address not found: pass one explicitly or deploy to "
                f"{cfg.network} first (no {Path(cfg.deployments_dir) / (cfg.network + '.json')})"
            )
        candidate = record.contract_address
    try:
        return format_address(parse_address(candidate))
    except ValueError as e:
        raise ConfigurationError(f"invalid contract address {candidate!r}: {e}") from e


def describe_journal(journal_bytes: bytes) -> Optional[Journal]:
    """Decode and log the journal. Returns None (after logging) when it does not decode."""
    try:
        journal = decode_journal(journal_bytes)
    except JournalDecodeError as e:
        failure = JournalDecodeFailure(str(e))
        log.error("%s; continuing with submission", failure)
        return None
    log.info("journal notaryKeyFingerprint: 0x%s", journal.notary_key_fingerprint.hex())
    log.info("journal method: %s", journal.method)
    log.info("journal url: %s", journal.url)
    log.info("journal timestamp: %d (%s)", journal.timestamp, journal.timestamp_iso())
    log.info("journal queriesHash: 0x%s", journal.queries_hash.hex())
    log.info("journal balance: %r (%d chars)", journal.balance, len(journal.balance))
    return journal


def classify_revert(revert_data: str, stage: str, *, tx_hash: Optional[str] = None) -> ProofgateSdkError:
    """
    Map a revert payload to the error the caller sees: ValidationRejected for
    the validator's own errors, UnrecognizedRevert for anything else.
    """
    info = decode_revert(revert_data, BALANCE_VERIFIER_ABI)
    if info.kind in VALIDATOR_ERRORS:
        log.error("%s rejected by validator: %s", stage, info.kind)
        return ValidationRejected(kind=info.kind, stage=stage, tx_hash=tx_hash)
    log.error("%s reverted: %s (data %s)", stage, info.describe(), revert_data)
    return UnrecognizedRevert(revert_data=revert_data, stage=stage, message=info.describe(), tx_hash=tx_hash)


def _raise_rejection(err: RpcError, stage: str) -> NoReturn:
    data = get_revert_data(err)
    if data is None:
        log.error("%s failed: %s", stage, err)
        raise NetworkFailure(f"node refused {stage}: {err.message} (code {err.code})", method=err.method) from err
    raise classify_revert(data, stage) from err


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def submit_proof(
    opts: SubmitOptions,
    *,
    cfg: Optional[SDKConfig] = None,
    signer: Optional[Signer] = None,
    rpc: Optional[RpcClient] = None,
) -> SubmitResult:
    """
    Run the full submission flow for `opts`.

    `rpc` may be supplied by the caller (it is then left open); otherwise a
    client for the network's RPC URL is opened and closed here.
    """
    cfg = cfg or SDKConfig.from_env(opts.network)
    bundle = load_proof_bundle(opts.proof_file)
    address = resolve_contract_address(cfg, opts.contract_address)
    signer = signer or Signer.from_hex(cfg.require_private_key())

    with clog.trace_scope():
        clog.bind(network=cfg.network, contract=address, component="submit")
        log.info("submitting proof %s from %s", opts.proof_file, signer.address_hex)
        if rpc is not None:
            return _run(bundle, address, cfg, signer, rpc)
        with RpcClient(cfg.rpc_url, timeout=cfg.request_timeout, max_retries=cfg.max_retries) as owned:
            return _run(bundle, address, cfg, signer, owned)


def _run(bundle: ProofBundle, address: str, cfg: SDKConfig, signer: Signer, rpc: RpcClient) -> SubmitResult:
    journal, seal = bundle.journal, bundle.seal
    log.info("seal: %d bytes, journal: %d bytes", len(seal), len(journal))
    describe_journal(journal)

    contract = ContractClient(
        rpc,
        address,
        BALANCE_VERIFIER_ABI,
        chain_id=cfg.chain_id,
        confirmation_timeout=cfg.confirmation_timeout,
        poll_interval=cfg.poll_interval,
    )
    args = [journal, seal]

    log.info("simulating %s", SUBMIT_FN)
    try:
        contract.simulate(SUBMIT_FN, args, sender=signer.address)
    except RpcError as e:
        _raise_rejection(e, "simulate")
    log.info("simulation ok")

    stx = tx_send.build_and_sign(
        signer,
        chain_id=cfg.chain_id,
        nonce=tx_send.get_nonce(rpc, signer.address),
        to=parse_address(address),
        data=contract.encode(SUBMIT_FN, args),
    )
    try:
        tx_hash = tx_send.send_signed(rpc, stx)
    except RpcError as e:
        _raise_rejection(e, "submit")
    log.info("submitted tx %s; waiting for confirmation", tx_hash)

    receipt = tx_send.wait_for_receipt(
        rpc, tx_hash, timeout_s=cfg.confirmation_timeout, poll_interval_s=cfg.poll_interval
    )
    if receipt.get("status") != "success":
        raise classify_revert(receipt.get("revertData") or "0x", "submit", tx_hash=tx_hash)
    log.info("confirmed in block %d (gas %d)", receipt["blockNumber"], receipt["gasUsed"])

    balance = contract.call("balance")
    log.info("verified balance on ledger: %r", balance)
    return SubmitResult(
        transaction_hash=tx_hash,
        block_number=int(receipt["blockNumber"]),
        gas_used=int(receipt["gasUsed"]),
        balance=balance,
    )


__all__ = [
    "SubmitOptions",
    "SubmitResult",
    "resolve_contract_address",
    "describe_journal",
    "classify_revert",
    "submit_proof",
]
