import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from jobboard.exceptions import NotFoundError
from jobboard.models import Application, Job
from jobboard.services.fields import UNCHANGED, FieldUpdate, resolve
from jobboard.services.transaction import commit
from jobboard.services.users import user_to_dict
from jobboard.validation import (
    validate_cursor,
    validate_job_description,
    validate_job_location,
    validate_job_title,
    validate_published,
    validate_salary,
    validate_take,
)

logger = logging.getLogger(__name__)


def format_salary(salary) -> str:
    return f"{salary:.3f}"


def job_to_dict(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "createdAt": job.created_at.isoformat() if job.created_at else None,
        "updatedAt": job.updated_at.isoformat() if job.updated_at else None,
        "title": job.title,
        "description": job.description,
        "salary": format_salary(job.salary),
        "location": job.location,
        "published": job.published,
        "authorId": job.author_id,
    }


def count_applications(db: Session, job_ids: list[int]) -> dict[int, int]:
    """Number of applications per job id, zero for jobs without any."""
    if not job_ids:
        return {}
    rows = (
        db.query(Application.job_id, func.count(Application.id))
        .filter(Application.job_id.in_(job_ids))
        .group_by(Application.job_id)
        .all()
    )
    counts = {job_id: 0 for job_id in job_ids}
    counts.update({job_id: count for job_id, count in rows})
    return counts


def create_job(
    db: Session,
    author_id: str,
    title: str,
    description: str,
    salary: str,
    location: str,
    published: bool | str | None = None,
) -> dict[str, Any]:
    """Create a job owned by ``author_id``; unpublished unless told otherwise."""
    job = Job(
        title=validate_job_title(title),
        description=validate_job_description(description),
        salary=validate_salary(salary),
        location=validate_job_location(location),
        published=False if published is None else validate_published(published),
        author_id=author_id,
    )
    db.add(job)
    commit(db, f"create job for author {author_id}")
    db.refresh(job)
    logger.info("Created job %d for author %s", job.id, author_id)
    return job_to_dict(job)


def get_job_record(db: Session, job_id: int) -> Job | None:
    return db.query(Job).filter(Job.id == job_id).first()


def get_job(db: Session, job_id: int) -> dict[str, Any] | None:
    """Return ``{job, appCount}`` or None when the job does not exist."""
    job = get_job_record(db, job_id)
    if job is None:
        return None
    return {
        "job": job_to_dict(job),
        "appCount": count_applications(db, [job.id])[job.id],
    }


def list_jobs(
    db: Session,
    only_published: bool = True,
    author_id: str | None = None,
    take: Any = None,
    cursor: Any = None,
) -> list[dict[str, Any]]:
    """List jobs newest first as ``{job, author, appCount}`` entries.

    ``only_published=False`` lists every job regardless of publication state
    and is meant for an author looking at their own jobs.
    """
    take = validate_take(take)
    cursor = validate_cursor(cursor)

    query = db.query(Job).options(joinedload(Job.author))
    if only_published:
        query = query.filter(Job.published == True)  # noqa: E712
    if author_id is not None:
        query = query.filter(Job.author_id == author_id)
    if cursor is not None:
        query = query.filter(Job.id < cursor)
    jobs = query.order_by(Job.id.desc()).limit(take).all()

    counts = count_applications(db, [job.id for job in jobs])
    return [
        {
            "job": job_to_dict(job),
            "author": user_to_dict(job.author),
            "appCount": counts[job.id],
        }
        for job in jobs
    ]


def update_job(
    db: Session,
    job_id: int,
    title: FieldUpdate = UNCHANGED,
    description: FieldUpdate = UNCHANGED,
    salary: FieldUpdate = UNCHANGED,
    location: FieldUpdate = UNCHANGED,
    published: FieldUpdate = UNCHANGED,
) -> dict[str, Any]:
    changes = {}
    for field, update, validator in (
        ("title", title, validate_job_title),
        ("description", description, validate_job_description),
        ("salary", salary, validate_salary),
        ("location", location, validate_job_location),
        ("published", published, validate_published),
    ):
        changed, value = resolve(update, field, validator)
        if changed:
            changes[field] = value

    job = get_job_record(db, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    for field, value in changes.items():
        setattr(job, field, value)
    commit(db, f"update job {job_id}")
    db.refresh(job)
    return job_to_dict(job)


def delete_job(db: Session, job_id: int) -> None:
    """Delete a job and, through the cascade, its applications."""
    job = get_job_record(db, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    db.delete(job)
    commit(db, f"delete job {job_id}")
    logger.info("Deleted job %d", job_id)
