"""
execution.runtime.contracts - Python contract model and code registry.

Contracts are plain Python classes. A class becomes deployable by registering
it under a *code name*; a DEPLOY transaction names the code and carries the
ABI-encoded constructor arguments, which are stored next to the code as the
contract's immutables.

    @register_contract("Counter")
    class Counter(Contract):
        ABI = [...]

        def __init__(self, ctx, start):
            super().__init__(ctx)
            self.start = start

        @external("increment")
        def increment(self) -> None:
            ...

        @external("get", view=True)
        def get(self) -> int:
            ...

Every call instantiates the class afresh from the stored immutables, so the
only mutable state is what the contract writes through `self.ctx`.
Constructors run on deploy as well, so argument validation in `__init__`
rejects bad deployments.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, Optional, Type, TypeVar

from core.encoding import abi

from ..errors import InvalidTx, Revert
from .env import CallContext

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=Type["Contract"])

_REGISTRY: Dict[str, Type["Contract"]] = {}


class Contract:
    """Base class for Python contracts hosted by the dev ledger."""

    ABI: ClassVar[abi.Abi] = ()
    CODE_NAME: ClassVar[str] = ""

    def __init__(self, ctx: CallContext) -> None:
        self.ctx = ctx

    @property
    def address(self) -> bytes:
        return self.ctx.address


def external(name: str, *, view: bool = False) -> Callable[[F], F]:
    """Expose a method as the ABI function `name`."""

    def deco(fn: F) -> F:
        setattr(fn, "__abi_name__", name)
        setattr(fn, "__abi_view__", view)
        return fn

    return deco


def register_contract(code_name: str) -> Callable[[C], C]:
    def deco(cls: C) -> C:
        existing = _REGISTRY.get(code_name)
        if existing is not None and existing is not cls:
            raise ValueError(f"contract code {code_name!r} already registered")
        cls.CODE_NAME = code_name
        _REGISTRY[code_name] = cls
        return cls

    return deco


def get_contract_class(code_name: str) -> Type[Contract]:
    try:
        return _REGISTRY[code_name]
    except KeyError:
        raise InvalidTx(f"unknown contract code {code_name!r}", reason="UNKNOWN_CODE") from None


def decode_init_args(cls: Type[Contract], init_args: bytes) -> tuple:
    ctor = abi.constructor(cls.ABI)
    types = abi.input_types(ctor) if ctor else []
    try:
        return abi.decode_values(types, init_args)
    except abi.AbiCodecError as e:
        raise Revert(f"bad constructor arguments for {cls.CODE_NAME}: {e}") from e


def instantiate(cls: Type[Contract], ctx: CallContext, init_args: bytes) -> Contract:
    return cls(ctx, *decode_init_args(cls, init_args))


def load_contract(ctx: CallContext) -> Contract:
    """Instantiate the contract deployed at `ctx.address`; revert if there is none."""
    code = ctx.state.get_code(ctx.address)
    if code is None:
        raise Revert(f"no contract at 0x{ctx.address.hex()}")
    cls: Optional[Type[Contract]] = _REGISTRY.get(code.name)
    if cls is None:
        # code deployed under a name that is no longer registered in this process
        log.error("contract code %r is not registered", code.name)
        raise Revert(f"code {code.name!r} unavailable")
    return instantiate(cls, ctx, code.init_args)


__all__ = [
    "Contract",
    "external",
    "register_contract",
    "get_contract_class",
    "decode_init_args",
    "instantiate",
    "load_contract",
]
