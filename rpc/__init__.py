"""
proofgate JSON-RPC node: a FastAPI app exposing the dev ledger.

    from rpc.server import create_app
"""
