"""proofgate_sdk.proofs - proof bundle files."""

from .bundle import ProofBundle, load_proof_bundle, parse_proof_bundle, save_proof_bundle

__all__ = ["ProofBundle", "load_proof_bundle", "parse_proof_bundle", "save_proof_bundle"]
