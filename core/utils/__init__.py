"""
Proofgate - core.utils
----------------------

Small helpers used across the tree:

- `bytes` : hex/bytes helpers, length guards, address formatting
- `hash`  : SHA-256, SHA3-256, Keccak-256

Names like `bytes` and `hash` shadow Python builtins if imported directly;
prefer `from core.utils.bytes import to_hex` style imports.
"""
