"""
contracts.tests
===============

Tests for the on-ledger contracts. Fixtures live in `conftest.py`; the root
conftest supplies signers, the dev ledger and journal builders.
"""
