"""
Proofgate RPC - JSON-RPC 2.0 Dispatcher
=======================================

Features
--------
• JSON-RPC 2.0: single & batch, named & positional params, notifications.
• Structured error mapping (standard codes + ledger codes via rpc.errors).
• Async-aware execution; handlers may be sync or async.
• Deterministic responses: {"jsonrpc":"2.0", "id":..., "result":...} or {"error":...}.

This module is framework-light; rpc/server.py mounts it at POST /rpc.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from rpc import methods

from .errors import (InvalidParams, InvalidRequest, MethodNotFound, RpcError,
                     error_response, to_error)

log = logging.getLogger(__name__)

Json = Dict[str, Any]
Params = Union[List[Any], Dict[str, Any]]
CallableLike = Union[Callable[..., Any], Callable[..., Awaitable[Any]]]

_NO_ID = object()  # sentinel for notification


# --------------------------------------------------------------------------------------
# Arg binding & execution
# --------------------------------------------------------------------------------------


def _bind_call_args(fn: CallableLike, params: Optional[Params]) -> Tuple[List[Any], Dict[str, Any]]:
    """Bind positional/named params to `fn` using its signature."""
    sig = inspect.signature(fn)
    try:
        if params is None:
            bound = sig.bind()
        elif isinstance(params, list):
            bound = sig.bind(*params)
        else:
            bound = sig.bind(**params)
    except TypeError as e:
        # Signature mismatch (wrong arity/unknown kw)
        raise InvalidParams(str(e)) from None
    return list(bound.args), dict(bound.kwargs)


async def _maybe_await(x: Any) -> Any:
    if inspect.isawaitable(x):
        return await x
    return x


# --------------------------------------------------------------------------------------
# Core dispatch
# --------------------------------------------------------------------------------------


def _validate_request_obj(obj: Any) -> Tuple[str, Optional[Params], Any]:
    """
    Validate base request object; returns (method, params, id).
    Raises InvalidRequest on structural errors. Does NOT validate method existence.
    """
    if not isinstance(obj, dict):
        raise InvalidRequest("request must be an object")
    if obj.get("jsonrpc") != "2.0":
        raise InvalidRequest("jsonrpc must be '2.0'")

    method = obj.get("method")
    if not isinstance(method, str) or not method:
        raise InvalidRequest("method must be a non-empty string")

    req_id = obj.get("id", _NO_ID)
    if req_id is not _NO_ID and not (req_id is None or isinstance(req_id, (str, int, float))):
        raise InvalidRequest("id must be string, number, or null")

    params = obj.get("params")
    if params is not None and not isinstance(params, (list, dict)):
        raise InvalidParams("params, if present, must be array or object")
    return method, params, req_id


async def dispatch_one(obj: Any) -> Optional[Json]:
    """
    Dispatch a single JSON-RPC request object.
    Returns a response object or None (for notifications).
    """
    req_id = obj.get("id", _NO_ID) if isinstance(obj, dict) else None
    try:
        method_name, params, req_id = _validate_request_obj(obj)
        spec = methods.resolve(method_name)
        if spec is None:
            raise MethodNotFound(method_name)
        args, kwargs = _bind_call_args(spec.func, params)
        result = await _maybe_await(spec.func(*args, **kwargs))
    except Exception as exc:
        err = to_error(exc)
        log.debug("JSON-RPC %s failed: %s", obj.get("method") if isinstance(obj, dict) else "?", err)
        if req_id is _NO_ID:
            return None
        if not (req_id is None or isinstance(req_id, (str, int, float))):
            req_id = None
        return error_response(req_id, err)

    if req_id is _NO_ID:
        return None
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


async def dispatch(payload: Any) -> Union[Json, List[Json], None]:
    """
    Dispatch a parsed JSON payload (already json.loads'ed).
    Handles single objects and batches.
    """
    if isinstance(payload, list):
        if not payload:
            return error_response(None, InvalidRequest("empty batch"))
        results = [await dispatch_one(obj) for obj in payload]
        out = [r for r in results if r is not None]
        return out or None
    if isinstance(payload, dict):
        return await dispatch_one(payload)
    return error_response(None, InvalidRequest("payload must be object or array"))


__all__ = ["dispatch", "dispatch_one", "RpcError"]
