from __future__ import annotations

import typing as t

from rpc import deps
from rpc.methods import method


@method("dev.mine")
def mine() -> dict[str, t.Any]:
    """Seal the pending pool into a new block and return it."""
    return deps.get_ctx().ledger.mine().to_dict()


__all__ = ["mine"]
