"""BalanceVerifier: journal validator and state committer for web-proof balances."""

from .abi import BALANCE_VERIFIER_ABI, VALIDATOR_ERRORS
from .contract import (BALANCE_KEY, CODE_NAME, BalanceVerifier,
                       DeploymentConfig, InvalidBalance,
                       InvalidNotaryKeyFingerprint, InvalidQueriesHash,
                       InvalidUrl, MalformedJournal, ZKProofVerificationFailed,
                       validate_journal)

__all__ = [
    "BALANCE_VERIFIER_ABI",
    "VALIDATOR_ERRORS",
    "BALANCE_KEY",
    "CODE_NAME",
    "BalanceVerifier",
    "DeploymentConfig",
    "validate_journal",
    "MalformedJournal",
    "InvalidNotaryKeyFingerprint",
    "InvalidQueriesHash",
    "InvalidUrl",
    "InvalidBalance",
    "ZKProofVerificationFailed",
]
