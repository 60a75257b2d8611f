"""
Deploy a BalanceVerifier (and, on dev networks, its mock receipt verifier).

Steps
-----
1. Resolve parameters: explicit `DeploymentParameters`, else the environment

       ZK_PROVER_GUEST_ID        imageId, 32-byte hex
       NOTARY_KEY_FINGERPRINT    32-byte hex
       QUERIES_HASH              32-byte hex
       EXPECTED_URL              URL prefix

   Unset values and all-zero hashes are ConfigurationError.
2. If no verifier address is given, deploy `RiscZeroMockVerifier(0xFFFFFFFF)`
   and warn that proofs are only mock-checked.
3. Deploy `BalanceVerifier(verifier, imageId, fingerprint, queriesHash, url)`.
4. Write `deployments/<network>.json`.
"""

from __future__ import annotations

import datetime as _dt
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from contracts.balance_verifier.abi import BALANCE_VERIFIER_ABI
from contracts.balance_verifier.contract import CODE_NAME as VALIDATOR_CODE
from contracts.mock_verifier.abi import VERIFIER_ABI
from contracts.mock_verifier.contract import CODE_NAME as MOCK_VERIFIER_CODE
from contracts.mock_verifier.contract import MOCK_SELECTOR
from core import logging as clog
from core.encoding import abi
from core.utils.bytes import from_hex, parse_address, to_hex

from ..config import SDKConfig
from ..deployments import DeploymentParameters, DeploymentRecord, save_deployment
from ..errors import ConfigurationError, TxError
from ..rpc.http import RpcClient
from ..tx import send as tx_send
from ..wallet.signer import Signer

log = logging.getLogger(__name__)

_ENV_KEYS = {
    "image_id": "ZK_PROVER_GUEST_ID",
    "notary_key_fingerprint": "NOTARY_KEY_FINGERPRINT",
    "queries_hash": "QUERIES_HASH",
}


@dataclass(frozen=True)
class DeployOptions:
    """`params.verifier_address` is always replaced by the given or freshly deployed verifier."""

    network: str
    verifier_address: Optional[str] = None
    params: Optional[DeploymentParameters] = None


def _bytes32_from_env(name: str) -> str:
    raw = os.getenv(name, "").strip()
    if not raw:
        raise ConfigurationError(f"{name} is not set")
    try:
        value = from_hex(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} is not valid hex: {e}") from e
    if len(value) != 32:
        raise ConfigurationError(f"{name} must be 32 bytes, got {len(value)}")
    if not any(value):
        raise ConfigurationError(f"{name} is all zeros")
    return to_hex(value)


def params_from_env(verifier_address: str) -> DeploymentParameters:
    url = os.getenv("EXPECTED_URL", "").strip()
    if not url:
        raise ConfigurationError("EXPECTED_URL is not set")
    fields: Dict[str, Any] = {k: _bytes32_from_env(env) for k, env in _ENV_KEYS.items()}
    try:
        return DeploymentParameters(verifier_address=verifier_address, expected_url=url, **fields)
    except ValidationError as e:
        raise ConfigurationError(f"invalid deployment parameters: {e}") from e


def _normalize_verifier(address: Optional[str]) -> Optional[str]:
    if address is None:
        return None
    try:
        return to_hex(parse_address(address))
    except ValueError as e:
        raise ConfigurationError(f"invalid verifier address {address!r}: {e}") from e


def _deploy(rpc: RpcClient, cfg: SDKConfig, signer: Signer, code: str, ctor_args: bytes) -> Dict[str, Any]:
    stx = tx_send.build_and_sign(
        signer,
        chain_id=cfg.chain_id,
        nonce=tx_send.get_nonce(rpc, signer.address),
        data=ctor_args,
        code=code,
    )
    receipt = tx_send.send_and_wait(
        rpc, stx, timeout_s=cfg.confirmation_timeout, poll_interval_s=cfg.poll_interval
    )
    if receipt.get("status") != "success" or not receipt.get("contractAddress"):
        raise TxError(f"{code} deployment reverted", tx_hash=receipt.get("transactionHash"), receipt=receipt)
    log.info("%s deployed at %s", code, receipt["contractAddress"])
    return receipt


def deploy_mock_verifier(rpc: RpcClient, cfg: SDKConfig, signer: Signer) -> str:
    log.warning(
        "no verifier address given: deploying %s, seals are NOT cryptographically checked",
        MOCK_VERIFIER_CODE,
    )
    receipt = _deploy(rpc, cfg, signer, MOCK_VERIFIER_CODE, abi.encode_constructor(VERIFIER_ABI, [MOCK_SELECTOR]))
    return receipt["contractAddress"]


def deploy(
    opts: DeployOptions,
    *,
    cfg: Optional[SDKConfig] = None,
    signer: Optional[Signer] = None,
    rpc: Optional[RpcClient] = None,
) -> DeploymentRecord:
    """
    Deploy the validator on `opts.network` and persist its deployment record.

    `rpc` may be supplied (e.g. a client bound to an in-process node); it is
    then left open for the caller. Otherwise one is opened for this call.
    """
    cfg = cfg or SDKConfig.from_env(opts.network)
    signer = signer or Signer.from_hex(cfg.require_private_key())

    with clog.trace_scope():
        clog.bind(network=cfg.network, component="deploy")
        if rpc is not None:
            return _deploy_all(opts, cfg, signer, rpc)
        with RpcClient(cfg.rpc_url, timeout=cfg.request_timeout, max_retries=cfg.max_retries) as owned:
            return _deploy_all(opts, cfg, signer, owned)


def _deploy_all(opts: DeployOptions, cfg: SDKConfig, signer: Signer, rpc: RpcClient) -> DeploymentRecord:
    # parameters are resolved (and validated) before any transaction is sent
    verifier = _normalize_verifier(opts.verifier_address)
    params = opts.params or params_from_env(verifier or "0x" + "00" * 20)
    if verifier is None:
        verifier = deploy_mock_verifier(rpc, cfg, signer)
    params = params.model_copy(update={"verifier_address": verifier})

    ctor = abi.encode_constructor(
        BALANCE_VERIFIER_ABI,
        [
            parse_address(verifier),
            from_hex(params.image_id),
            from_hex(params.notary_key_fingerprint),
            from_hex(params.queries_hash),
            params.expected_url,
        ],
    )
    receipt = _deploy(rpc, cfg, signer, VALIDATOR_CODE, ctor)

    record = DeploymentRecord(
        network=cfg.network,
        chain_id=cfg.chain_id,
        contract_address=receipt["contractAddress"],
        deployer=signer.address_hex,
        transaction_hash=receipt["transactionHash"],
        block_number=int(receipt["blockNumber"]),
        gas_used=int(receipt["gasUsed"]),
        timestamp=_dt.datetime.now(_dt.timezone.utc).isoformat(timespec="seconds"),
        parameters=params,
    )
    path = save_deployment(record, Path(cfg.deployments_dir))
    log.info("deployment record written to %s", path)
    return record


__all__ = ["DeployOptions", "params_from_env", "deploy_mock_verifier", "deploy"]
