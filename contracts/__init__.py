"""
Proofgate contracts.

Importing this package registers every contract code with the execution
runtime so the dev ledger can deploy them by name:

- "BalanceVerifier"      contracts.balance_verifier
- "RiscZeroMockVerifier" contracts.mock_verifier
"""

from . import balance_verifier, mock_verifier  # noqa: F401  (registration side effect)

__all__ = ["balance_verifier", "mock_verifier"]
