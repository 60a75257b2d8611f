"""
execution.state - journaled world state (storage, code, nonces).
"""

from .journal import ContractCode, JournalError, StateJournal

__all__ = ["ContractCode", "JournalError", "StateJournal"]
