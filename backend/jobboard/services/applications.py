import logging
from typing import Any

from sqlalchemy.orm import Session, joinedload

from jobboard.exceptions import ConflictError, NotFoundError
from jobboard.models import Application
from jobboard.services.fields import UNCHANGED, FieldUpdate, resolve
from jobboard.services.jobs import get_job_record, job_to_dict
from jobboard.services.transaction import commit
from jobboard.services.users import user_to_dict
from jobboard.validation import validate_cover_letter, validate_cursor, validate_take

logger = logging.getLogger(__name__)

DUPLICATE_APPLICATION_MESSAGE = "An application for this job already exists"


def application_to_dict(application: Application) -> dict[str, Any]:
    return {
        "id": application.id,
        "createdAt": application.created_at.isoformat() if application.created_at else None,
        "updatedAt": application.updated_at.isoformat() if application.updated_at else None,
        "coverLetter": application.cover_letter,
        "jobId": application.job_id,
        "authorId": application.author_id,
    }


def create_application(
    db: Session,
    author_id: str,
    job_id: int,
    cover_letter: str,
) -> dict[str, Any]:
    """Apply to a job. A worker may hold at most one application per job."""
    cover_letter = validate_cover_letter(cover_letter)
    if get_job_record(db, job_id) is None:
        raise NotFoundError("Job", job_id)
    if get_author_application_record(db, job_id, author_id) is not None:
        raise ConflictError(DUPLICATE_APPLICATION_MESSAGE)

    application = Application(cover_letter=cover_letter, job_id=job_id, author_id=author_id)
    db.add(application)
    commit(
        db,
        f"create application of {author_id} for job {job_id}",
        conflict_message=DUPLICATE_APPLICATION_MESSAGE,
    )
    db.refresh(application)
    logger.info("Created application %d for job %d", application.id, job_id)
    return application_to_dict(application)


def get_application_record(db: Session, application_id: int) -> Application | None:
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.id == application_id)
        .first()
    )


def get_application(db: Session, application_id: int) -> dict[str, Any] | None:
    application = get_application_record(db, application_id)
    if application is None:
        return None
    return application_to_dict(application)


def get_author_application_record(
    db: Session, job_id: int, author_id: str
) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.author_id == author_id)
        .first()
    )


def get_author_application(db: Session, job_id: int, author_id: str) -> dict[str, Any] | None:
    """The application ``author_id`` sent for ``job_id``, if any."""
    application = get_author_application_record(db, job_id, author_id)
    if application is None:
        return None
    return application_to_dict(application)


def list_job_applications(
    db: Session,
    job_id: int,
    take: Any = None,
    cursor: Any = None,
) -> list[dict[str, Any]]:
    """Applications received by a job as ``{application, author}`` entries."""
    take = validate_take(take)
    cursor = validate_cursor(cursor)

    query = (
        db.query(Application)
        .options(joinedload(Application.author))
        .filter(Application.job_id == job_id)
    )
    if cursor is not None:
        query = query.filter(Application.id < cursor)
    applications = query.order_by(Application.id.desc()).limit(take).all()
    return [
        {
            "application": application_to_dict(application),
            "author": user_to_dict(application.author),
        }
        for application in applications
    ]


def list_author_applications(
    db: Session,
    author_id: str,
    take: Any = None,
    cursor: Any = None,
) -> list[dict[str, Any]]:
    """Applications sent by a worker as ``{application, job}`` entries."""
    take = validate_take(take)
    cursor = validate_cursor(cursor)

    query = (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.author_id == author_id)
    )
    if cursor is not None:
        query = query.filter(Application.id < cursor)
    applications = query.order_by(Application.id.desc()).limit(take).all()
    return [
        {
            "application": application_to_dict(application),
            "job": job_to_dict(application.job),
        }
        for application in applications
    ]


def update_application(
    db: Session,
    application_id: int,
    cover_letter: FieldUpdate = UNCHANGED,
) -> dict[str, Any]:
    changed, value = resolve(cover_letter, "coverLetter", validate_cover_letter)

    application = get_application_record(db, application_id)
    if application is None:
        raise NotFoundError("Application", application_id)
    if changed:
        application.cover_letter = value
    commit(db, f"update application {application_id}")
    db.refresh(application)
    return application_to_dict(application)


def delete_application(db: Session, application_id: int) -> None:
    application = get_application_record(db, application_id)
    if application is None:
        raise NotFoundError("Application", application_id)
    db.delete(application)
    commit(db, f"delete application {application_id}")
    logger.info("Deleted application %d", application_id)
