from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_caller
from jobboard.policy import Action, Caller, Resource, enforce
from jobboard.schemas import ApplicationCreate, ApplicationUpdate
from jobboard.services import applications as application_service
from jobboard.services.fields import from_request
from jobboard.validation import MAXIMUM_ID, MINIMUM_ID, validate_id

router = APIRouter()

ApplicationId = Annotated[int, Path(ge=MINIMUM_ID, le=MAXIMUM_ID)]


@router.post("/application", status_code=status.HTTP_201_CREATED)
def create_application(
    application_data: ApplicationCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Apply to a job with a cover letter. Workers only."""
    enforce(caller, Action.APPLICATION_CREATE)
    job_id = validate_id("jobId", application_data.job_id)
    return application_service.create_application(
        db, caller.id, job_id, application_data.cover_letter
    )


@router.get("/application/{application_id}")
def get_application(
    application_id: ApplicationId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    """Readable by the applicant and by the company owning the job."""
    application = application_service.get_application_record(db, application_id)
    enforce(caller, Action.APPLICATION_READ, Resource.of_application(application))
    return application_service.application_to_dict(application)


@router.put("/application/{application_id}")
def update_application(
    application_id: ApplicationId,
    application_data: ApplicationUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    application = application_service.get_application_record(db, application_id)
    enforce(caller, Action.APPLICATION_UPDATE, Resource.of_application(application))
    return application_service.update_application(
        db,
        application_id,
        cover_letter=from_request(application_data, "cover_letter"),
    )


@router.delete("/application/{application_id}")
def delete_application(
    application_id: ApplicationId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    application = application_service.get_application_record(db, application_id)
    enforce(caller, Action.APPLICATION_DELETE, Resource.of_application(application))
    application_service.delete_application(db, application_id)
    return {"message": "Application deleted", "application_id": application_id}
