"""Session resolution for tokens issued by the external auth provider.

The provider stores a signed JWT whose ``sub`` claim is the user id in the
``access_token`` cookie (browsers) or sends it as a bearer token (API clients).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Request
from jose import jwt, JWTError

from jobboard.config import get_settings

COOKIE_NAME = "access_token"


@dataclass(frozen=True)
class SessionInfo:
    user_id: str


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expire_hours)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token. Returns None if invalid."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
        return payload
    except JWTError:
        return None


def _request_token(request: Request) -> str | None:
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def resolve_session(request: Request) -> SessionInfo | None:
    """Return the session carried by the request, or None when anonymous."""
    token = _request_token(request)
    if not token:
        return None

    payload = decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        return None
    return SessionInfo(user_id=user_id)
