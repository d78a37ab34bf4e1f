import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_caller
from jobboard.policy import Action, Caller, enforce
from jobboard.services.maintenance import clean_database

logger = logging.getLogger(__name__)
router = APIRouter()


@router.delete("/clean")
def clean(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)):
    """Wipe every application, job and user except the calling admin."""
    enforce(caller, Action.DATABASE_CLEAN)
    clean_database(db, caller.id)
    return {"message": "Database cleaned"}
