"""Role and ownership based authorization.

Every route asks the same question: may this caller perform this action on
this resource? The answers live in one table (``RULES``) and ``decide`` is a
pure function of its inputs, so the policy can be tested without HTTP or a
database.

A missing resource is denied exactly like a resource owned by someone else,
which keeps the existence of private jobs and applications hidden.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Union

from jobboard.exceptions import NotPermittedError, UnauthenticatedError
from jobboard.models import Application, Job, Role, User

logger = logging.getLogger(__name__)


class Action(str, Enum):
    JOB_CREATE = "job:create"
    JOB_READ = "job:read"
    JOB_UPDATE = "job:update"
    JOB_DELETE = "job:delete"
    JOB_LIST_PUBLIC = "job:list-public"
    JOB_LIST_PRIVATE = "job:list-private"
    APPLICATION_CREATE = "application:create"
    APPLICATION_READ = "application:read"
    APPLICATION_UPDATE = "application:update"
    APPLICATION_DELETE = "application:delete"
    APPLICATION_LIST_FOR_JOB = "application:list-for-job"
    APPLICATION_LIST_OWN = "application:list-own"
    USER_READ_SELF = "user:read-self"
    USER_UPDATE_SELF = "user:update-self"
    USER_CREATE = "user:create"
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_LIST = "user:list"
    DATABASE_CLEAN = "database:clean"


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    NOT_PERMITTED = "not_permitted"


@dataclass(frozen=True)
class Caller:
    id: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(id=user.id, role=user.role)


@dataclass(frozen=True)
class Resource:
    """Ownership facts about the target of an action.

    ``author_id`` is the direct owner (job author, application author, or the
    author whose job list is requested). ``job_author_id`` is the owner of the
    job an application refers to.
    """

    author_id: str | None = None
    job_author_id: str | None = None

    @classmethod
    def of_job(cls, job: Job | None) -> "Resource | None":
        if job is None:
            return None
        return cls(author_id=job.author_id)

    @classmethod
    def of_application(cls, application: Application | None) -> "Resource | None":
        if application is None:
            return None
        return cls(author_id=application.author_id, job_author_id=application.job.author_id)


@dataclass(frozen=True)
class Allow:
    allowed = True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    allowed = False


Decision = Union[Allow, Deny]
ALLOW = Allow()

Predicate = Callable[[Caller, Union[Resource, None]], bool]


class Rule(NamedTuple):
    predicate: Predicate
    public: bool = False


def _anyone(caller: Caller, resource: Resource | None) -> bool:
    return True


def _role(*roles: Role) -> Predicate:
    def check(caller: Caller, resource: Resource | None) -> bool:
        return caller.role in roles

    return check


def _role_and_owner(role: Role) -> Predicate:
    def check(caller: Caller, resource: Resource | None) -> bool:
        return (
            caller.role == role
            and resource is not None
            and resource.author_id == caller.id
        )

    return check


def _application_reader(caller: Caller, resource: Resource | None) -> bool:
    if resource is None:
        return False
    if caller.role == Role.WORKER:
        return resource.author_id == caller.id
    if caller.role == Role.COMPANY:
        return resource.job_author_id == caller.id
    return False


RULES: dict[Action, Rule] = {
    Action.JOB_CREATE: Rule(_role(Role.COMPANY)),
    Action.JOB_READ: Rule(_anyone, public=True),
    Action.JOB_UPDATE: Rule(_role_and_owner(Role.COMPANY)),
    Action.JOB_DELETE: Rule(_role_and_owner(Role.COMPANY)),
    Action.JOB_LIST_PUBLIC: Rule(_anyone, public=True),
    Action.JOB_LIST_PRIVATE: Rule(_role_and_owner(Role.COMPANY)),
    Action.APPLICATION_CREATE: Rule(_role(Role.WORKER)),
    Action.APPLICATION_READ: Rule(_application_reader),
    Action.APPLICATION_UPDATE: Rule(_role_and_owner(Role.WORKER)),
    Action.APPLICATION_DELETE: Rule(_role_and_owner(Role.WORKER)),
    Action.APPLICATION_LIST_FOR_JOB: Rule(_role_and_owner(Role.COMPANY)),
    Action.APPLICATION_LIST_OWN: Rule(_role(Role.WORKER)),
    Action.USER_READ_SELF: Rule(_anyone),
    Action.USER_UPDATE_SELF: Rule(_anyone),
    Action.USER_CREATE: Rule(_role(Role.ADMIN)),
    Action.USER_READ: Rule(_role(Role.ADMIN)),
    Action.USER_UPDATE: Rule(_role(Role.ADMIN)),
    Action.USER_DELETE: Rule(_role(Role.ADMIN)),
    Action.USER_LIST: Rule(_role(Role.ADMIN)),
    Action.DATABASE_CLEAN: Rule(_role(Role.ADMIN)),
}


def decide(caller: Caller | None, action: Action, resource: Resource | None = None) -> Decision:
    """Allow or deny ``action``; anonymous callers only reach public actions."""
    rule = RULES[action]
    if caller is None:
        if rule.public:
            return ALLOW
        return Deny(DenyReason.UNAUTHENTICATED)
    if rule.predicate(caller, resource):
        return ALLOW
    return Deny(DenyReason.NOT_PERMITTED)


def is_allowed(caller: Caller | None, action: Action, resource: Resource | None = None) -> bool:
    return decide(caller, action, resource).allowed


def enforce(caller: Caller | None, action: Action, resource: Resource | None = None) -> None:
    """Raise the matching error when ``decide`` denies the action."""
    decision = decide(caller, action, resource)
    if decision.allowed:
        return
    logger.info(
        "Denied %s for caller %s: %s",
        action.value,
        caller.id if caller else "anonymous",
        decision.reason.value,
    )
    if decision.reason == DenyReason.UNAUTHENTICATED:
        raise UnauthenticatedError()
    raise NotPermittedError()
