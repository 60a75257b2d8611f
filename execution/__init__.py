"""
Proofgate execution layer - deterministic Python contract host, journaled
state, receipts and the in-process dev ledger.

This package exposes nothing at import time; import from the subpackages:

    from execution.ledger import Ledger
    from execution.runtime.contracts import Contract, external, register_contract
"""
