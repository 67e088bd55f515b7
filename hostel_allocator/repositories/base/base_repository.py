"""
Base repository with standardized CRUD operations and error handling.

Repositories stage changes on the session; services decide when to commit.
"""

from typing import Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_allocator.core.exceptions import DuplicateEntryError, StorageError
from hostel_allocator.core.logging import get_logger
from hostel_allocator.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Wraps driver errors in StorageError so services can report them without
    knowing about SQLAlchemy.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    # ==================== Transaction Management ====================

    def flush(self) -> None:
        """Send pending changes to the database without committing."""
        try:
            self.db.flush()
        except IntegrityError as e:
            raise DuplicateEntryError(
                f"{self.model.__name__} violates a uniqueness constraint",
                table=self.model.__tablename__,
            ) from e
        except SQLAlchemyError as e:
            raise StorageError(
                f"Flush failed: {str(e)}",
                operation="flush",
                table=self.model.__tablename__,
            ) from e

    # ==================== Create Operations ====================

    def add(self, entity: ModelType, flush: bool = True) -> ModelType:
        """
        Stage a new entity.

        Args:
            entity: Entity to add
            flush: Whether to flush immediately so generated keys are available

        Returns:
            The staged entity
        """
        self.db.add(entity)
        if flush:
            self.flush()
        return entity

    def add_all(self, entities: Iterable[ModelType], flush: bool = True) -> List[ModelType]:
        entities = list(entities)
        self.db.add_all(entities)
        if flush:
            self.flush()
        return entities

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """
        Find entity by ID.

        Returns:
            Entity or None
        """
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise StorageError(
                f"Find by ID failed: {str(e)}",
                operation="select",
                table=self.model.__tablename__,
            ) from e

    def find_by_ids(self, ids: Iterable[str]) -> List[ModelType]:
        """Load every entity whose id is in ``ids``; order is not preserved."""
        ids = list(ids)
        if not ids:
            return []
        return self._scalars(select(self.model).where(self.model.id.in_(ids)))

    def count(self) -> int:
        try:
            return self.db.scalar(select(func.count()).select_from(self.model)) or 0
        except SQLAlchemyError as e:
            raise StorageError(
                f"Count failed: {str(e)}",
                operation="count",
                table=self.model.__tablename__,
            ) from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType, flush: bool = True) -> None:
        self.db.delete(entity)
        if flush:
            self.flush()

    # ==================== Helpers ====================

    def _scalars(self, statement) -> List:
        try:
            return list(self.db.scalars(statement).all())
        except SQLAlchemyError as e:
            raise StorageError(
                f"Query failed: {str(e)}",
                operation="select",
                table=self.model.__tablename__,
            ) from e

    def _scalar(self, statement):
        try:
            return self.db.scalar(statement)
        except SQLAlchemyError as e:
            raise StorageError(
                f"Query failed: {str(e)}",
                operation="select",
                table=self.model.__tablename__,
            ) from e

    def _rows(self, statement) -> List:
        try:
            return list(self.db.execute(statement).all())
        except SQLAlchemyError as e:
            raise StorageError(
                f"Query failed: {str(e)}",
                operation="select",
                table=self.model.__tablename__,
            ) from e
