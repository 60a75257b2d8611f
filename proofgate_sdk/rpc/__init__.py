"""proofgate_sdk.rpc - JSON-RPC transport."""

from .http import RpcClient

__all__ = ["RpcClient"]
