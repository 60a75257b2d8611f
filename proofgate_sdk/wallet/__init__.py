"""proofgate_sdk.wallet - key handling and transaction signing."""

from .signer import Signer

__all__ = ["Signer"]
