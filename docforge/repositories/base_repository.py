from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docforge.core.exceptions import StorageError
from docforge.database.models import utc_now
from docforge.utils.logging import get_logger

# Define a generic type for SQLAlchemy models
ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Base repository implementing the artifact store operations.

    Every write is committed on its own, so a record is either fully
    visible or absent. Driver errors roll the session back and surface as
    ``StorageError``.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session
            model: The SQLAlchemy model class this repository manages
        """
        self.session = session
        self.model = model
        self.logger = LOGGER

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        """Get a record by its ID.

        Args:
            id: The UUID of the record

        Returns:
            The record if found, None otherwise
        """
        try:
            query = select(self.model).where(self.model.id == id)
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving {self.model.__name__} by ID {id}: {str(e)}",
                exc_info=True
            )
            raise StorageError(f"Failed to read {self.model.__name__} {id}", original_error=e) from e

    async def get_many(self, ids: List[UUID]) -> List[ModelType]:
        """Get every record whose ID is in ``ids``; missing IDs are skipped."""
        if not ids:
            return []
        try:
            query = select(self.model).where(self.model.id.in_(ids))
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving {self.model.__name__} batch: {str(e)}", exc_info=True)
            raise StorageError(f"Failed to read {self.model.__name__} records", original_error=e) from e

    async def list_by_project(
        self,
        project_id: UUID,
        filters: Optional[Dict[str, Any]] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """List a project's records, newest first.

        Args:
            project_id: Owning project
            filters: Dictionary of field_name: value (a list/tuple/set value means IN)
            created_from: Inclusive lower bound on created_at
            created_to: Inclusive upper bound on created_at
            limit: Maximum number of records to return

        Returns:
            List of records ordered by created_at descending
        """
        try:
            query = select(self.model).where(self.model.project_id == project_id)

            if filters:
                for field, value in filters.items():
                    if not hasattr(self.model, field):
                        continue
                    column = getattr(self.model, field)
                    if isinstance(value, (list, tuple, set)):
                        query = query.where(column.in_(list(value)))
                    else:
                        query = query.where(column == value)

            if created_from is not None:
                query = query.where(self.model.created_at >= created_from)
            if created_to is not None:
                query = query.where(self.model.created_at <= created_to)

            query = query.order_by(self.model.created_at.desc())
            if limit is not None:
                query = query.limit(limit)

            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error listing {self.model.__name__} for project {project_id}: {str(e)}",
                exc_info=True
            )
            raise StorageError(f"Failed to list {self.model.__name__} records", original_error=e) from e

    async def get_latest(
        self, project_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Optional[ModelType]:
        """Most recently created record of a project matching the filters."""
        records = await self.list_by_project(project_id, filters=filters, limit=1)
        return records[0] if records else None

    async def create(self, **kwargs) -> ModelType:
        """Create and commit a new record.

        Args:
            **kwargs: Fields and values for the new record

        Returns:
            The created record
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(instance)
            return instance
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(
                f"Error creating {self.model.__name__}: {str(e)}",
                exc_info=True
            )
            raise StorageError(f"Failed to store {self.model.__name__}", original_error=e) from e

    async def update(self, id: UUID, **kwargs) -> Optional[ModelType]:
        """Update an existing record.

        Args:
            id: The UUID of the record to update
            **kwargs: Fields and values to update

        Returns:
            The updated record if found, None otherwise
        """
        instance = await self.get_by_id(id)
        if not instance:
            return None

        try:
            for key, value in kwargs.items():
                if hasattr(instance, key):
                    setattr(instance, key, value)

            if hasattr(instance, "updated_at"):
                setattr(instance, "updated_at", utc_now())

            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(instance)
            return instance
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(
                f"Error updating {self.model.__name__} {id}: {str(e)}",
                exc_info=True
            )
            raise StorageError(f"Failed to update {self.model.__name__} {id}", original_error=e) from e
