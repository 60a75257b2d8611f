"""
Proof bundle files.

The prover writes `{"success": true, "data": {"zkProof": "0x…",
"journalDataAbi": "0x…"}}`. Older bundles carry the two fields at the top
level; both shapes load, and the nested values win when both are present.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.utils.bytes import from_hex, is_hex

from ..errors import InvalidProofFile


class ProofBundle(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    zk_proof: str = Field(alias="zkProof")
    journal_data_abi: str = Field(alias="journalDataAbi")

    @field_validator("zk_proof", "journal_data_abi")
    @classmethod
    def _hex(cls, v: str) -> str:
        if not (isinstance(v, str) and v.startswith("0x") and is_hex(v)):
            raise ValueError("must be a 0x-prefixed even-length hex string")
        return v.lower()

    @property
    def seal(self) -> bytes:
        return from_hex(self.zk_proof)

    @property
    def journal(self) -> bytes:
        return from_hex(self.journal_data_abi)

    def to_file_obj(self) -> Dict[str, Any]:
        return {"success": True, "data": self.model_dump(by_alias=True)}


def _pick(obj: Dict[str, Any], key: str) -> Optional[Any]:
    nested = obj.get("data")
    if isinstance(nested, dict) and nested.get(key) is not None:
        return nested[key]
    return obj.get(key)


def parse_proof_bundle(obj: Any, *, path: Optional[str] = None) -> ProofBundle:
    if not isinstance(obj, dict):
        raise InvalidProofFile("top-level JSON value must be an object", path=path)
    fields = {k: _pick(obj, k) for k in ("zkProof", "journalDataAbi")}
    missing = [k for k, v in fields.items() if v is None]
    if missing:
        raise InvalidProofFile(f"missing {', '.join(missing)}", path=path)
    try:
        return ProofBundle.model_validate(fields)
    except ValidationError as e:
        raise InvalidProofFile(str(e), path=path) from e


def load_proof_bundle(path: Path | str) -> ProofBundle:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            obj = json.load(fh)
    except FileNotFoundError:
        raise InvalidProofFile("file not found", path=str(p)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidProofFile(f"cannot read: {e}", path=str(p)) from e
    except json.JSONDecodeError as e:
        raise InvalidProofFile(f"invalid JSON: {e}", path=str(p)) from e
    return parse_proof_bundle(obj, path=str(p))


def save_proof_bundle(bundle: ProofBundle, path: Path | str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(bundle.to_file_obj(), indent=2) + "\n", encoding="utf-8")
    return p


__all__ = ["ProofBundle", "parse_proof_bundle", "load_proof_bundle", "save_proof_bundle"]
