"""
Shared plumbing for the hostel services: session, settings, logging and
unit-of-work handling.
"""

from typing import Any, Dict, Optional
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings, get_settings
from hostel_allocator.core.exceptions import (
    BaseAppException,
    DuplicateEntryError,
    StorageError,
)
from hostel_allocator.core.logging import get_logger
from hostel_allocator.services.base.service_result import ServiceResult


class BaseService:
    """
    Services own one SQLAlchemy session each and turn every failure into a
    ServiceResult instead of letting it reach the router.
    """

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        self.db: Session = db_session
        self.settings: Settings = settings or get_settings()
        self._logger = get_logger(f"hostel_allocator.services.{self.__class__.__name__}").add_context(
            service=self.__class__.__name__
        )

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert an exception to a failed ServiceResult, logging it on the way.

        Domain exceptions keep their own code and status; anything else is an
        internal error.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            self._logger.warning(f"{operation} rejected: {exception.message}", extra=context)
            return ServiceResult.from_app_exception(exception)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.internal_error(
            operation,
            details={
                "error": str(exception),
                "entity_ref": context["entity_ref"],
            },
        )

    @contextmanager
    def transaction(self):
        """
        Commit on success, roll back on any exception.

        Example:
            with self.transaction():
                self.rooms.add(room)
        """
        try:
            yield self.db
            self._commit()
        except Exception:
            self._rollback()
            raise

    def _commit(self) -> None:
        """Commit the current transaction, translating driver errors."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except IntegrityError as e:
            self._rollback()
            raise DuplicateEntryError(f"Commit rejected by a uniqueness constraint: {e.orig}") from e
        except SQLAlchemyError as e:
            self._rollback()
            raise StorageError(f"Commit failed: {e}", operation="commit") from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
