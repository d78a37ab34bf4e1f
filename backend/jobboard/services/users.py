import logging
from typing import Any

from sqlalchemy.orm import Session

from jobboard.exceptions import FORMAT_ERROR_CODE, ConflictError, NotFoundError, ParameterFormatError
from jobboard.models import Application, Job, Role, User
from jobboard.services.fields import UNCHANGED, FieldUpdate, resolve
from jobboard.services.transaction import commit
from jobboard.validation import (
    validate_email,
    validate_image_path,
    validate_name,
    validate_role,
    validate_take,
    validate_username,
)

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "username": user.username,
        "imagePath": user.image_path,
        "role": user.role.value,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
    }


def _validate_optional(value: Any, validator) -> Any:
    return None if value is None else validator(value)


def _ensure_email_free(db: Session, email: str, user_id: str | None = None) -> None:
    query = db.query(User.id).filter(User.email == email)
    if user_id is not None:
        query = query.filter(User.id != user_id)
    if query.first() is not None:
        raise ConflictError(f"Email {email} already registered")


def _ensure_role_change_allowed(db: Session, user: User, role: Role) -> None:
    """A role may only be left once nothing authored under it remains."""
    if user.role == role:
        return
    if user.role == Role.COMPANY:
        if db.query(Job.id).filter(Job.author_id == user.id).first() is not None:
            raise ConflictError(f"User {user.id} still owns jobs and must stay COMPANY")
    elif user.role == Role.WORKER:
        if db.query(Application.id).filter(Application.author_id == user.id).first() is not None:
            raise ConflictError(f"User {user.id} still owns applications and must stay WORKER")


def create_user(
    db: Session,
    email: str,
    name: str | None = None,
    username: str | None = None,
    image_path: str | None = None,
    role: Role | str | None = None,
) -> dict[str, Any]:
    """Create a user; the role defaults to WORKER."""
    name = _validate_optional(name, validate_name)
    email = validate_email(email)
    username = _validate_optional(username, validate_username)
    image_path = _validate_optional(image_path, validate_image_path)
    role = Role.WORKER if role is None else validate_role(role)

    _ensure_email_free(db, email)
    user = User(
        email=email,
        name=name,
        username=username,
        image_path=image_path,
        role=role,
    )
    db.add(user)
    commit(db, f"create user {email}", conflict_message=f"Email {email} already registered")
    db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role.value)
    return user_to_dict(user)


def get_user_record(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user(db: Session, user_id: str) -> dict[str, Any] | None:
    user = get_user_record(db, user_id)
    if user is None:
        return None
    return user_to_dict(user)


def list_users(
    db: Session,
    take: Any = None,
    cursor: Any = None,
    role: Role | str | None = None,
) -> list[dict[str, Any]]:
    """List users newest first, optionally restricted to one role."""
    take = validate_take(take)
    if cursor is not None and not isinstance(cursor, str):
        raise ParameterFormatError(f"Parameter not correct: cursor {cursor!r}", FORMAT_ERROR_CODE)

    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == validate_role(role))
    if cursor:
        query = query.filter(User.id < cursor)
    users = query.order_by(User.id.desc()).limit(take).all()
    return [user_to_dict(user) for user in users]


def update_user(
    db: Session,
    user_id: str,
    name: FieldUpdate = UNCHANGED,
    email: FieldUpdate = UNCHANGED,
    username: FieldUpdate = UNCHANGED,
    image_path: FieldUpdate = UNCHANGED,
    role: FieldUpdate = UNCHANGED,
) -> dict[str, Any]:
    """Apply a partial update. Nothing is written unless every field validates."""
    changes = {}
    for field, update, validator, nullable in (
        ("name", name, validate_name, True),
        ("email", email, validate_email, False),
        ("username", username, validate_username, True),
        ("image_path", image_path, validate_image_path, True),
        ("role", role, validate_role, False),
    ):
        changed, value = resolve(update, field, validator, nullable=nullable)
        if changed:
            changes[field] = value

    user = get_user_record(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    if "email" in changes:
        _ensure_email_free(db, changes["email"], user_id)
    if "role" in changes:
        _ensure_role_change_allowed(db, user, changes["role"])

    for field, value in changes.items():
        setattr(user, field, value)
    commit(db, f"update user {user_id}", conflict_message="Email already registered")
    db.refresh(user)
    return user_to_dict(user)


def delete_user(db: Session, user_id: str) -> None:
    """Delete a user together with their jobs and applications."""
    user = get_user_record(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    db.delete(user)
    commit(db, f"delete user {user_id}")
    logger.info("Deleted user %s", user_id)
