"""
Base Repository - shared session handling for the repositories
"""
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from services.errors import ConflictError, PersistenceError
from utils.logger import get_logger

logger = get_logger(__name__)


class BaseRepository:
    """Base class for repositories bound to one database session"""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, conflict_message: str = "Duplicate value") -> None:
        """
        Commit the current transaction

        Integrity violations become ConflictError, any other store failure
        becomes PersistenceError. The session is rolled back in both cases.
        """
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Integrity violation", error=str(e.orig))
            raise ConflictError(conflict_message, details=str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Database commit failed", error=str(e))
            raise PersistenceError("Database operation failed", details=str(e)) from e

    def _save(self, instance, conflict_message: str = "Duplicate value"):
        """Add, commit and refresh a single instance"""
        self.db.add(instance)
        self._commit(conflict_message)
        self.db.refresh(instance)
        return instance
