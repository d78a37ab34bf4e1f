from jobboard.services.auth import (
    SessionInfo,
    create_access_token,
    decode_access_token,
    resolve_session,
)

__all__ = [
    "SessionInfo",
    "create_access_token",
    "decode_access_token",
    "resolve_session",
]
