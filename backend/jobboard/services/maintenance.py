import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.models import Application, Job, User
from jobboard.services.transaction import commit

logger = logging.getLogger(__name__)


def clean_database(db: Session, keep_user_id: str) -> None:
    """Remove every application, job and user except ``keep_user_id``.

    Children go first so no foreign key is left dangling, and the three
    deletes share one transaction.
    """
    try:
        applications = db.execute(delete(Application)).rowcount
        jobs = db.execute(delete(Job)).rowcount
        users = db.execute(delete(User).where(User.id != keep_user_id)).rowcount
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to clean database")
        raise
    commit(db, "clean database")
    db.expire_all()
    logger.warning(
        "Database cleaned by %s: %d applications, %d jobs, %d users removed",
        keep_user_id,
        applications,
        jobs,
        users,
    )
