"""
execution.receipts - receipt construction for included transactions.
"""

from .builder import build_receipt

__all__ = ["build_receipt"]
