"""
Deployment records: where a network's validator lives and how it was
configured.

One JSON file per network, `deployments/<network>.json`, written once by the
deployer and read by the submission client to locate the contract:

    {
      "network": "devnet", "chainId": 1337,
      "contractAddress": "0x…", "deployer": "0x…",
      "transactionHash": "0x…", "blockNumber": 2, "gasUsed": 53210,
      "timestamp": "2026-01-05T12:34:56+00:00",
      "parameters": {"verifierAddress": "0x…", "imageId": "0x…",
                     "notaryKeyFingerprint": "0x…", "queriesHash": "0x…",
                     "expectedUrl": "https://…"}
    }

Validation: addresses are 20-byte 0x-hex, hashes and ids 32-byte 0x-hex.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.utils.bytes import is_hex, strip0x

from .errors import ConfigurationError


def _hex_of_len(v: str, n: int, what: str) -> str:
    if not (isinstance(v, str) and v.startswith("0x") and is_hex(v) and len(strip0x(v)) == 2 * n):
        raise ValueError(f"{what} must be 0x-hex of {n} bytes")
    return v.lower()


class DeploymentParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    verifier_address: str = Field(alias="verifierAddress")
    image_id: str = Field(alias="imageId")
    notary_key_fingerprint: str = Field(alias="notaryKeyFingerprint")
    queries_hash: str = Field(alias="queriesHash")
    expected_url: str = Field(alias="expectedUrl")

    @field_validator("verifier_address")
    @classmethod
    def _addr(cls, v: str) -> str:
        return _hex_of_len(v, 20, "verifierAddress")

    @field_validator("image_id", "notary_key_fingerprint", "queries_hash")
    @classmethod
    def _b32(cls, v: str) -> str:
        return _hex_of_len(v, 32, "bytes32 parameter")


class DeploymentRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    network: str
    chain_id: int = Field(alias="chainId")
    contract_address: str = Field(alias="contractAddress")
    deployer: str
    transaction_hash: str = Field(alias="transactionHash")
    block_number: int = Field(alias="blockNumber")
    gas_used: int = Field(alias="gasUsed")
    timestamp: str
    parameters: DeploymentParameters

    @field_validator("contract_address", "deployer")
    @classmethod
    def _addr(cls, v: str) -> str:
        return _hex_of_len(v, 20, "address")

    @field_validator("transaction_hash")
    @classmethod
    def _hash(cls, v: str) -> str:
        return _hex_of_len(v, 32, "transactionHash")


def record_path(network: str, directory: Path | str = "deployments") -> Path:
    return Path(directory) / f"{network}.json"


def save_deployment(record: DeploymentRecord, directory: Path | str = "deployments") -> Path:
    path = record_path(record.network, directory)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(record.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
    return path


def load_deployment(network: str, directory: Path | str = "deployments") -> Optional[DeploymentRecord]:
    """Record for `network`, or None when no file exists. A corrupt file is a ConfigurationError."""
    path = record_path(network, directory)
    if not path.is_file():
        return None
    try:
        return DeploymentRecord.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigurationError(f"invalid deployment record {path}: {e}") from e


__all__ = [
    "DeploymentParameters",
    "DeploymentRecord",
    "record_path",
    "save_deployment",
    "load_deployment",
]
