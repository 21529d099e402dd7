"""TaskGate authentication module."""

from taskgate.auth.context import AuthContext
from taskgate.auth.token import decode_token, verify_bearer_token

__all__ = [
    "AuthContext",
    "decode_token",
    "verify_bearer_token",
]
