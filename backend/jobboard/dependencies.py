from fastapi import Request, Depends
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.exceptions import NotPermittedError, UnauthenticatedError
from jobboard.models import User
from jobboard.policy import Caller
from jobboard.services.auth import SessionInfo, resolve_session
from jobboard.services.users import get_user_record


def get_session_info(request: Request) -> SessionInfo | None:
    """Session of the request as resolved by the external auth provider."""
    return resolve_session(request)


def get_optional_current_user(
    session: SessionInfo | None = Depends(get_session_info),
    db: Session = Depends(get_db),
) -> User | None:
    """Get the current user if authenticated, None otherwise.

    Useful for endpoints that are public but answer differently per role.
    """
    if session is None:
        return None
    return get_user_record(db, session.user_id)


def get_current_user(
    session: SessionInfo | None = Depends(get_session_info),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user.

    Raises ``UnauthenticatedError`` without a session and ``NotPermittedError``
    when the session points at a user that no longer exists.
    """
    if session is None:
        raise UnauthenticatedError()
    user = get_user_record(db, session.user_id)
    if user is None:
        raise NotPermittedError()
    return user


def get_optional_caller(user: User | None = Depends(get_optional_current_user)) -> Caller | None:
    if user is None:
        return None
    return Caller.from_user(user)


def get_caller(user: User = Depends(get_current_user)) -> Caller:
    return Caller.from_user(user)
