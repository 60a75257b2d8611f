"""
proofgate_sdk.tests.conftest
============================

- node / rpc      : in-process node and an RpcClient wired to it
- sdk_config      : SDKConfig pointing at the node, fast polling, tmp deployments dir
- deployed        : DeploymentRecord of a BalanceVerifier behind the mock verifier
- bundle_for      : write a proof bundle for a raw journal (valid mock seal by default)
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from core.utils.bytes import from_hex
from proofgate_sdk.config import SDKConfig
from proofgate_sdk.contracts.deployer import DeployOptions, deploy
from proofgate_sdk.deployments import DeploymentParameters, DeploymentRecord
from proofgate_sdk.tests import TEST_URL, node_rpc, write_bundle
from zk.verifiers.risc0 import journal_digest, mock_seal


@pytest.fixture
def node():
    return node_rpc()


@pytest.fixture
def rpc(node):
    return node[0]


@pytest.fixture
def sdk_config(tmp_path: Path) -> SDKConfig:
    return SDKConfig(
        network="devnet",
        rpc_url=TEST_URL,
        chain_id=1337,
        max_retries=0,
        confirmation_timeout=1.0,
        poll_interval=0.01,
        deployments_dir=tmp_path / "deployments",
    )


@pytest.fixture
def deployed(rpc, sdk_config, signer, deployment_params) -> DeploymentRecord:
    params = DeploymentParameters(
        verifier_address="0x" + "00" * 20,
        image_id="0x" + deployment_params["image_id"].hex(),
        notary_key_fingerprint="0x" + deployment_params["notary_key_fingerprint"].hex(),
        queries_hash="0x" + deployment_params["queries_hash"].hex(),
        expected_url=deployment_params["expected_url"],
    )
    opts = DeployOptions(network="devnet", params=params)
    return deploy(opts, cfg=sdk_config, signer=signer, rpc=rpc)


@pytest.fixture
def bundle_for(tmp_path: Path, deployed) -> Callable[..., Path]:
    image_id = from_hex(deployed.parameters.image_id)

    def _write(raw: bytes, seal: Optional[bytes] = None, name: str = "proof.json") -> Path:
        if seal is None:
            seal = mock_seal(image_id, journal_digest(raw))
        return write_bundle(tmp_path / name, raw, seal)

    return _write
