"""
proofgate SDK - Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    ConfirmationTimeout,
    InvalidProofFile,
    NetworkFailure,
    ProofgateSdkError,
    RpcError,
    UnrecognizedRevert,
    ValidationRejected,
)

# RPC
from .rpc.http import RpcClient  # noqa: F401

# Wallet
from .wallet.signer import Signer  # noqa: F401

# Tx helpers
from .tx.send import send_and_wait, wait_for_receipt  # noqa: F401

# Contracts
from .contracts.client import ContractClient  # noqa: F401
from .contracts.deployer import DeployOptions, deploy  # noqa: F401

# Proofs & submission
from .proofs.bundle import ProofBundle, load_proof_bundle  # noqa: F401
from .prover import WebProverClient  # noqa: F401
from .submit import SubmitOptions, SubmitResult, submit_proof  # noqa: F401
