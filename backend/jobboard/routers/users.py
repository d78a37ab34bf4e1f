from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_caller, get_current_user
from jobboard.exceptions import NotFoundError, NotImplementedOperationError
from jobboard.models import Role, User
from jobboard.policy import Action, Caller, enforce
from jobboard.schemas import ProfileUpdate, UserCreate, UserUpdate
from jobboard.services import applications as application_service
from jobboard.services import users as user_service
from jobboard.services.fields import SetTo, from_request
from jobboard.validation import validate_role

router = APIRouter()


@router.get("/user")
def get_own_user(user: User = Depends(get_current_user)):
    """Get the record of the calling user."""
    enforce(Caller.from_user(user), Action.USER_READ_SELF)
    return user_service.user_to_dict(user)


@router.post("/user", status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Create a user account. Admins only."""
    enforce(caller, Action.USER_CREATE)
    return user_service.create_user(
        db,
        user_data.email,
        name=user_data.name,
        username=user_data.username,
        image_path=user_data.image_path,
        role=user_data.role,
    )


@router.put("/user")
def update_own_user(
    user_data: ProfileUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Update the caller's own profile.

    Switching between COMPANY and WORKER is self-service; granting the ADMIN
    role still needs an admin.
    """
    enforce(caller, Action.USER_UPDATE_SELF)
    role = from_request(user_data, "role")
    if isinstance(role, SetTo) and validate_role(role.value) == Role.ADMIN:
        enforce(caller, Action.USER_UPDATE)
    return user_service.update_user(
        db,
        caller.id,
        name=from_request(user_data, "name"),
        username=from_request(user_data, "username"),
        image_path=from_request(user_data, "image_path"),
        role=role,
    )


@router.get("/user/applications")
def list_own_applications(
    take: str | None = Query(None, description="Page size (1-1000)"),
    cursor: str | None = Query(None, description="Id of the last application already seen"),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """List the applications the calling worker sent, newest first."""
    enforce(caller, Action.APPLICATION_LIST_OWN)
    return application_service.list_author_applications(db, caller.id, take, cursor)


@router.api_route("/user/applications", methods=["PUT", "DELETE"], include_in_schema=False)
def own_applications_not_implemented():
    """Only GET exists here; other verbs must not reach the `/user/{user_id}` routes."""
    raise NotImplementedOperationError()


@router.get("/user/{user_id}")
def get_user(
    user_id: str,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    enforce(caller, Action.USER_READ)
    user = user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


@router.put("/user/{user_id}")
def update_user(
    user_id: str,
    user_data: UserUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    enforce(caller, Action.USER_UPDATE)
    return user_service.update_user(
        db,
        user_id,
        name=from_request(user_data, "name"),
        email=from_request(user_data, "email"),
        username=from_request(user_data, "username"),
        image_path=from_request(user_data, "image_path"),
        role=from_request(user_data, "role"),
    )


@router.delete("/user/{user_id}")
def delete_user(
    user_id: str,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Delete a user with their jobs and applications. Admins only."""
    enforce(caller, Action.USER_DELETE)
    user_service.delete_user(db, user_id)
    return {"message": "User deleted", "user_id": user_id}


@router.get("/users")
def list_users(
    take: str | None = Query(None, description="Page size (1-1000)"),
    cursor: str | None = Query(None, description="Id of the last user already seen"),
    role: str | None = Query(None, description="Only list users with this role"),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    enforce(caller, Action.USER_LIST)
    return user_service.list_users(db, take=take, cursor=cursor, role=role)
