"""RISC Zero mock receipt verifier hosted on the dev ledger."""

from .abi import VERIFIER_ABI
from .contract import CODE_NAME, MOCK_SELECTOR, RiscZeroMockVerifier, VerificationFailed

__all__ = ["CODE_NAME", "MOCK_SELECTOR", "VERIFIER_ABI", "RiscZeroMockVerifier", "VerificationFailed"]
