"""
Submission flow against an in-process node: success, each validator
rejection (caught at simulation, before anything is sent), malformed
journals, target resolution, confirmation timeouts, and faults between
simulation and confirmation (lost responses, dropped connections, state
changing under a pending submission).
"""
from __future__ import annotations

import json
import logging

import httpx
import pytest

from contracts.mock_verifier import VERIFIER_ABI, VerificationFailed
from core.encoding import abi
from core.utils.bytes import from_hex
from execution.runtime.contracts import Contract, external, register_contract
from proofgate_sdk.contracts.deployer import DeployOptions, deploy
from proofgate_sdk.deployments import DeploymentParameters
from proofgate_sdk.errors import (ConfigurationError, ConfirmationTimeout, InvalidProofFile, NetworkFailure,
                                  UnrecognizedRevert, ValidationRejected)
from proofgate_sdk.rpc import http as rpc_http
from proofgate_sdk.rpc.http import RpcClient
from proofgate_sdk.submit import SubmitOptions, resolve_contract_address, submit_proof
from proofgate_sdk.tests import TEST_URL, node_rpc, write_bundle
from proofgate_sdk.tx import send as tx_send
from zk.verifiers.risc0 import journal_digest, mock_seal


@pytest.fixture
def run(rpc, sdk_config, signer):
    def _run(proof_file, contract_address=None):
        opts = SubmitOptions(network="devnet", proof_file=proof_file, contract_address=contract_address)
        return submit_proof(opts, cfg=sdk_config, signer=signer, rpc=rpc)

    return _run


def _nonce(ledger, signer) -> int:
    return ledger.pending_nonce(signer.address)


def test_accepted_proof_updates_balance(run, deployed, bundle_for, make_journal, node, signer):
    _rpc, ledger = node
    _, raw = make_journal(balance="987.65")
    result = run(bundle_for(raw))

    assert result.balance == "987.65"
    assert result.block_number == ledger.head.height
    assert result.gas_used > 21_000
    receipt = ledger.receipt(from_hex(result.transaction_hash))
    assert receipt["status"] == "success"
    assert receipt["to"] == deployed.contract_address
    assert len(receipt["logs"]) == 1


def test_explicit_address_wins_over_record(run, deployed, bundle_for, make_journal, sdk_config):
    _, raw = make_journal()
    (sdk_config.deployments_dir / "devnet.json").unlink()
    assert run(bundle_for(raw), contract_address=deployed.contract_address).balance == "123.45"


@pytest.mark.parametrize(
    "overrides,kind",
    [
        ({"notary_key_fingerprint": b"\x99" * 32}, "InvalidNotaryKeyFingerprint"),
        ({"method": "POST"}, "InvalidUrl"),
        ({"queries_hash": b"\x23" * 32}, "InvalidQueriesHash"),
        ({"url": "https://evil.example.com/v1/balance"}, "InvalidUrl"),
        ({"balance": ""}, "InvalidBalance"),
    ],
)
def test_rejections_are_caught_at_simulation(run, deployed, bundle_for, make_journal, node, signer, overrides, kind):
    _rpc, ledger = node
    _, raw = make_journal(**overrides)
    before = _nonce(ledger, signer)
    with pytest.raises(ValidationRejected) as ei:
        run(bundle_for(raw))
    assert (ei.value.kind, ei.value.stage) == (kind, "simulate")
    assert _nonce(ledger, signer) == before


def test_bad_seal_is_zk_failure(run, deployed, bundle_for, make_journal):
    _, raw = make_journal()
    with pytest.raises(ValidationRejected) as ei:
        run(bundle_for(raw, seal=b"\xff\xff\xff\xff" + b"\x00" * 32))
    assert ei.value.kind == "ZKProofVerificationFailed"


def test_malformed_journal_is_logged_then_unrecognized(run, deployed, bundle_for, caplog):
    caplog.set_level(logging.INFO, logger="proofgate_sdk")
    with pytest.raises(UnrecognizedRevert) as ei:
        run(bundle_for(b"\x00" * 7, seal=b"\xaa"))
    assert ei.value.revert_data == "0x"
    assert ei.value.stage == "simulate"
    assert any("journal decode failed" in r.getMessage() for r in caplog.records)


def test_decoded_journal_fields_are_logged(run, deployed, bundle_for, make_journal, caplog):
    caplog.set_level(logging.INFO, logger="proofgate_sdk")
    _, raw = make_journal(timestamp=1_700_000_000)
    run(bundle_for(raw))
    messages = [r.getMessage() for r in caplog.records]
    assert any("2023-11-14T22:13:20+00:00" in m for m in messages)
    assert any("journal balance: '123.45'" in m for m in messages)


def test_invalid_proof_file_before_network(sdk_config, signer, tmp_path):
    class _Unreachable:
        def call(self, *a, **kw):
            raise AssertionError("network must not be used")

    opts = SubmitOptions(network="devnet", proof_file=tmp_path / "missing.json", contract_address="0x" + "11" * 20)
    with pytest.raises(InvalidProofFile):
        submit_proof(opts, cfg=sdk_config, signer=signer, rpc=_Unreachable())


def test_no_address_and_no_record(sdk_config):
    with pytest.raises(ConfigurationError, match="contract address not found"):
        resolve_contract_address(sdk_config)


def test_bad_explicit_address(sdk_config):
    with pytest.raises(ConfigurationError, match="invalid contract address"):
        resolve_contract_address(sdk_config, "0xnope")


def _params(deployment_params) -> DeploymentParameters:
    return DeploymentParameters(
        verifier_address="0x" + "00" * 20,
        image_id="0x" + deployment_params["image_id"].hex(),
        notary_key_fingerprint="0x" + deployment_params["notary_key_fingerprint"].hex(),
        queries_hash="0x" + deployment_params["queries_hash"].hex(),
        expected_url=deployment_params["expected_url"],
    )


def test_unconfirmed_submission_times_out(sdk_config, signer, deployment_params, make_journal, tmp_path):
    rpc, ledger = node_rpc()
    rec = deploy(DeployOptions(network="devnet", params=_params(deployment_params)), cfg=sdk_config, signer=signer, rpc=rpc)
    ledger.automine = False

    _, raw = make_journal()
    proof = write_bundle(tmp_path / "p.json", raw, mock_seal(deployment_params["image_id"], journal_digest(raw)))
    cfg = sdk_config.with_overrides(confirmation_timeout=0.05)
    with pytest.raises(ConfirmationTimeout) as ei:
        submit_proof(
            SubmitOptions(network="devnet", proof_file=proof, contract_address=rec.contract_address),
            cfg=cfg,
            signer=signer,
            rpc=rpc,
        )
    assert not isinstance(ei.value, ValidationRejected)
    assert ledger.pending_count() == 1


# -----------------------------------------------------------------------------
# Faults between simulation and confirmation
# -----------------------------------------------------------------------------

DISABLE = {"type": "function", "name": "disable", "stateMutability": "nonpayable", "inputs": [], "outputs": []}


@register_contract("sdk.SwitchableVerifier")
class SwitchableVerifier(Contract):
    """Accepts every seal until `disable()` is called."""

    ABI = [e for e in VERIFIER_ABI if e["type"] != "constructor"] + [DISABLE]

    @external("verify", view=True)
    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None:
        if self.ctx.storage_get(b"off"):
            raise VerificationFailed()

    @external("disable")
    def disable(self) -> None:
        self.ctx.storage_set(b"off", b"\x01")


class _Wire:
    """
    Stands in for the node's TestClient inside RpcClient.

    `before[method]` runs once before that method's request is forwarded and
    `after[method]` runs once with its response.
    """

    def __init__(self, inner):
        self.inner = inner
        self.before = {}
        self.after = {}
        self.seen = []

    def post(self, url, **kw):
        method = json.loads(kw["content"])["method"]
        self.seen.append(method)
        if method in self.before:
            self.before.pop(method)()
        resp = self.inner.post(url, **kw)
        if method in self.after:
            self.after.pop(method)(resp)
        return resp


def _over(wire: _Wire, *, max_retries: int = 0) -> RpcClient:
    return RpcClient(TEST_URL, client=wire, max_retries=max_retries)


def _submit(rpc, cfg, signer, proof_file, address):
    opts = SubmitOptions(network="devnet", proof_file=proof_file, contract_address=address)
    return submit_proof(opts, cfg=cfg, signer=signer, rpc=rpc)


def test_lost_send_response_is_resent_and_confirmed(
    deployed, bundle_for, make_journal, node, sdk_config, signer, monkeypatch
):
    rpc, ledger = node
    monkeypatch.setattr(rpc_http.time, "sleep", lambda s: None)

    def _drop(resp):
        raise httpx.ReadTimeout("response lost", request=resp.request)

    wire = _Wire(rpc.client)
    wire.after["tx.sendRawTransaction"] = _drop
    before = _nonce(ledger, signer)

    _, raw = make_journal(balance="555.00")
    result = _submit(_over(wire, max_retries=1), sdk_config, signer, bundle_for(raw), deployed.contract_address)

    assert result.balance == "555.00"
    assert wire.seen.count("tx.sendRawTransaction") == 2
    assert _nonce(ledger, signer) == before + 1
    assert ledger.receipt(from_hex(result.transaction_hash))["status"] == "success"


def test_node_refusal_without_revert_data_is_network_failure(
    run, deployed, bundle_for, make_journal, node, signer, monkeypatch
):
    _rpc, ledger = node
    monkeypatch.setattr(tx_send, "get_nonce", lambda rpc, address: 0)
    before = ledger.head.height
    _, raw = make_journal()
    with pytest.raises(NetworkFailure) as ei:
        run(bundle_for(raw))
    assert ei.value.method == "tx.sendRawTransaction"
    assert "refused submit" in str(ei.value)
    assert ledger.head.height == before


def test_dropped_connection_while_confirming_is_network_failure(
    deployed, bundle_for, make_journal, node, sdk_config, signer
):
    rpc, ledger = node

    def _refuse():
        raise httpx.ConnectError("connection refused")

    wire = _Wire(rpc.client)
    wire.before["tx.getTransactionReceipt"] = _refuse
    before = _nonce(ledger, signer)

    _, raw = make_journal()
    with pytest.raises(NetworkFailure) as ei:
        _submit(_over(wire), sdk_config, signer, bundle_for(raw), deployed.contract_address)
    assert not isinstance(ei.value, ConfirmationTimeout)
    assert ei.value.method == "tx.getTransactionReceipt"
    # the tx itself made it in
    assert _nonce(ledger, signer) == before + 1


def test_revert_after_passing_simulation_is_rejected_at_submit(
    node, sdk_config, signer, other_signer, deployment_params, make_journal, tmp_path
):
    rpc, ledger = node
    created = tx_send.send_and_wait(
        rpc,
        tx_send.build_and_sign(
            signer, chain_id=1337, nonce=tx_send.get_nonce(rpc, signer.address), code="sdk.SwitchableVerifier"
        ),
        timeout_s=1.0,
    )
    switch = created["contractAddress"]
    rec = deploy(
        DeployOptions(network="devnet", verifier_address=switch, params=_params(deployment_params)),
        cfg=sdk_config,
        signer=signer,
        rpc=rpc,
    )
    assert rec.parameters.verifier_address == switch

    def _switch_off():
        stx = tx_send.build_and_sign(
            other_signer,
            chain_id=1337,
            nonce=tx_send.get_nonce(rpc, other_signer.address),
            to=from_hex(switch),
            data=abi.encode_call(DISABLE, []),
        )
        assert tx_send.send_and_wait(rpc, stx, timeout_s=1.0)["status"] == "success"

    wire = _Wire(rpc.client)
    wire.before["tx.sendRawTransaction"] = _switch_off

    _, raw = make_journal()
    proof = write_bundle(tmp_path / "p.json", raw, b"\xaa")
    with pytest.raises(ValidationRejected) as ei:
        _submit(_over(wire), sdk_config, signer, proof, rec.contract_address)

    assert (ei.value.kind, ei.value.stage) == ("ZKProofVerificationFailed", "submit")
    assert ei.value.tx_hash is not None
    assert ledger.receipt(from_hex(ei.value.tx_hash))["status"] == "revert"
    assert "state.call" in wire.seen
