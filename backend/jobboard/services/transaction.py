import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.exceptions import ConflictError

logger = logging.getLogger(__name__)


def commit(db: Session, description: str, conflict_message: str | None = None) -> None:
    """Commit the unit of work or roll it back entirely.

    Integrity violations become ``ConflictError`` when ``conflict_message`` is
    given; every other database failure is logged and re-raised.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is not None:
            logger.info("Conflict while trying to %s: %s", description, conflict_message)
            raise ConflictError(conflict_message) from exc
        logger.exception("Integrity error while trying to %s", description)
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s", description)
        raise
