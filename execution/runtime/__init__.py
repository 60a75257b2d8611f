"""
execution.runtime - contract hosting and transaction application.

Submodules
----------
- env        : BlockEnv, GasCounter, CallContext (the contract's view of the world)
- contracts  : Contract base, @external, code registry
- dispatcher : selector → method routing, ABI decode/encode of args/returns
- executor   : apply_tx (atomic, checkpointed) and read-only call
"""
