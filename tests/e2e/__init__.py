"""
End-to-end tests: the SDK drives a full deployment and submission against an
in-process node over the JSON-RPC surface (no sockets, no external services).
"""
