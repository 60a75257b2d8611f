"""
Zero-knowledge verification adapters.

Proofs are *consumed* here, never produced: the proving pipeline lives in an
external service. See `zk.verifiers` for the verification interface.
"""
