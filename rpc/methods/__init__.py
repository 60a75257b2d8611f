"""
rpc.methods - JSON-RPC method table of the dev node.

Handlers are plain functions registered under a namespaced name:

    from rpc.methods import method

    @method("state.getNonce")
    def get_nonce(address: str, tag: str = "latest") -> int: ...

Namespaces served by the node:

    chain.*  chain id, head, blocks
    state.*  nonces, code, read-only contract calls
    tx.*     raw transaction submission, receipts
    dev.*    manual block production

The handler modules are imported by `ensure_loaded()` (the dispatcher calls it
through `resolve`), never at package import time.
"""

from __future__ import annotations

import importlib
import threading
import typing as t
from dataclasses import dataclass

Handler = t.Callable[..., t.Any]


@dataclass(frozen=True)
class MethodSpec:
    name: str
    func: Handler

    @property
    def namespace(self) -> str:
        return self.name.split(".", 1)[0]


_TABLE: dict[str, MethodSpec] = {}
_LOCK = threading.RLock()
_loaded = False

_HANDLER_MODULES = ("chain", "state", "tx", "dev")


def method(name: str) -> t.Callable[[Handler], Handler]:
    """Register the decorated function as JSON-RPC method `name`."""
    ns, _, short = name.partition(".")
    if not ns or not short:
        raise ValueError(f"method name must look like 'ns.method', got {name!r}")

    def deco(fn: Handler) -> Handler:
        with _LOCK:
            if name in _TABLE:
                raise KeyError(f"method {name!r} is already registered")
            _TABLE[name] = MethodSpec(name=name, func=fn)
        return fn

    return deco


def ensure_loaded() -> None:
    global _loaded
    with _LOCK:
        if _loaded:
            return
        for mod in _HANDLER_MODULES:
            importlib.import_module(f"{__name__}.{mod}")
        _loaded = True


def resolve(name: str) -> MethodSpec | None:
    ensure_loaded()
    return _TABLE.get(name)


def list_methods(namespace: str | None = None) -> list[str]:
    ensure_loaded()
    with _LOCK:
        names = sorted(_TABLE)
    if namespace is not None:
        names = [n for n in names if n.split(".", 1)[0] == namespace]
    return names


__all__ = ["MethodSpec", "method", "resolve", "list_methods", "ensure_loaded"]
