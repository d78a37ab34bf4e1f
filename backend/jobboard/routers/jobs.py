import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_caller, get_optional_caller
from jobboard.exceptions import NotFoundError
from jobboard.models import Role
from jobboard.policy import Action, Caller, Resource, enforce, is_allowed
from jobboard.schemas import JobCreate, JobUpdate
from jobboard.services import applications as application_service
from jobboard.services import jobs as job_service
from jobboard.services.fields import from_request
from jobboard.validation import MAXIMUM_ID, MINIMUM_ID

logger = logging.getLogger(__name__)
router = APIRouter()

JobId = Annotated[int, Path(ge=MINIMUM_ID, le=MAXIMUM_ID)]


@router.post("/job", status_code=status.HTTP_201_CREATED)
def create_job(
    job_data: JobCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Publish a new job owned by the calling company."""
    enforce(caller, Action.JOB_CREATE)
    return job_service.create_job(
        db,
        caller.id,
        job_data.title,
        job_data.description,
        job_data.salary,
        job_data.location,
        job_data.published,
    )


@router.get("/job/{job_id}")
def get_job(
    job_id: JobId,
    caller: Caller | None = Depends(get_optional_caller),
    db: Session = Depends(get_db),
):
    """Get a single job by ID.

    Workers also receive the application they sent for this job, if any.
    """
    enforce(caller, Action.JOB_READ)
    job = job_service.get_job(db, job_id)
    if job is None:
        raise NotFoundError("Job", job_id)
    if caller is not None and caller.role == Role.WORKER:
        job["application"] = application_service.get_author_application(db, job_id, caller.id)
    return job


@router.put("/job/{job_id}")
def update_job(
    job_id: JobId,
    job_data: JobUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Update a job. Only the owning company may do this."""
    job = job_service.get_job_record(db, job_id)
    enforce(caller, Action.JOB_UPDATE, Resource.of_job(job))
    return job_service.update_job(
        db,
        job_id,
        title=from_request(job_data, "title"),
        description=from_request(job_data, "description"),
        salary=from_request(job_data, "salary"),
        location=from_request(job_data, "location"),
        published=from_request(job_data, "published"),
    )


@router.delete("/job/{job_id}")
def delete_job(
    job_id: JobId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Delete a job and its applications. Only the owning company may do this."""
    job = job_service.get_job_record(db, job_id)
    enforce(caller, Action.JOB_DELETE, Resource.of_job(job))
    job_service.delete_job(db, job_id)
    return {"message": "Job deleted", "job_id": job_id}


@router.get("/job/{job_id}/applications")
def list_job_applications(
    job_id: JobId,
    take: str | None = Query(None, description="Page size (1-1000)"),
    cursor: str | None = Query(None, description="Id of the last application already seen"),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """List the applications a job received. Only the owning company may do this."""
    job = job_service.get_job_record(db, job_id)
    enforce(caller, Action.APPLICATION_LIST_FOR_JOB, Resource.of_job(job))
    return application_service.list_job_applications(db, job_id, take, cursor)


@router.get("/jobs")
def list_public_jobs(
    take: str | None = Query(None, description="Page size (1-1000)"),
    cursor: str | None = Query(None, description="Id of the last job already seen"),
    caller: Caller | None = Depends(get_optional_caller),
    db: Session = Depends(get_db),
):
    """List published jobs of every company, newest first."""
    enforce(caller, Action.JOB_LIST_PUBLIC)
    return job_service.list_jobs(db, only_published=True, take=take, cursor=cursor)


@router.get("/user/{user_id}/jobs")
def list_author_jobs(
    user_id: str,
    take: str | None = Query(None, description="Page size (1-1000)"),
    cursor: str | None = Query(None, description="Id of the last job already seen"),
    caller: Caller | None = Depends(get_optional_caller),
    db: Session = Depends(get_db),
):
    """List the jobs of one author.

    The author themselves also sees unpublished jobs; everybody else gets the
    published ones only.
    """
    only_published = not is_allowed(caller, Action.JOB_LIST_PRIVATE, Resource(author_id=user_id))
    return job_service.list_jobs(
        db,
        only_published=only_published,
        author_id=user_id,
        take=take,
        cursor=cursor,
    )
