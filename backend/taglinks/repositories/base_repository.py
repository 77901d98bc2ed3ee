"""Base repository with common CRUD operations."""
import logging
import math
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from taglinks.core.config import settings
from taglinks.core.exceptions import RepositoryError
from taglinks.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class Page(BaseModel):
    """One page of a structured query result."""

    results: List[Any]
    page_num: int
    page_size: int
    page_count: int
    record_count: int


def require_positive(value: int, name: str) -> int:
    """Validate a caller-supplied size or page number."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


class BaseRepository(Generic[ModelType]):
    """Generic base repository for common database operations."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    def _column(self, name: str):
        if name not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no column {name!r}")
        return getattr(self.model, name)

    def _conditions(self, filters: Mapping[str, Any]) -> List[Any]:
        """Equality conditions from column name -> value."""
        return [self._column(name) == value for name, value in filters.items()]

    def _required_conditions(self, filters: Mapping[str, Any], action: str) -> List[Any]:
        if not filters:
            raise ValueError(f"{action} requires at least one filter")
        return self._conditions(filters)

    def _values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        for name in values:
            self._column(name)
        return dict(values)

    async def _guard(self, awaitable, action: str):
        try:
            return await awaitable
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action} on {self.model.__tablename__}: {e}")
            raise RepositoryError(f"Failed to {action} on {self.model.__tablename__}") from e

    async def _execute(self, statement, action: str):
        return await self._guard(self.session.execute(statement), action)

    async def _flush(self, action: str) -> None:
        await self._guard(self.session.flush(), action)

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get model by primary key ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        result = await self._execute(
            select(self.model).filter(self.model.id == id), "get by id"
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[ModelType]:
        """Get all models.

        Returns:
            List of all model instances
        """
        result = await self._execute(select(self.model), "list")
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Create new model instance.

        Args:
            obj: Model instance to create

        Returns:
            Created model instance with ID populated
        """
        self.session.add(obj)
        await self._flush("create")
        await self._guard(self.session.refresh(obj), "refresh")
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete model instance.

        Args:
            obj: Model instance to delete
        """
        await self._guard(self.session.delete(obj), "delete")
        await self._flush("delete")

    async def select(self, statement: Select) -> List[Dict[str, Any]]:
        """Run a read statement and return its rows as plain dicts.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            List of column name -> value mappings
        """
        result = await self._execute(statement, "select")
        return [dict(row) for row in result.mappings().all()]

    async def get(
        self,
        filters: Mapping[str, Any],
        page_num: int = 1,
        page_size: Optional[int] = None,
        order_by: Optional[Sequence[Any]] = None,
    ) -> Page:
        """Get one page of models matching equality filters.

        Args:
            filters: Column name -> required value
            page_num: 1-based page number
            page_size: Page size, defaults to ``settings.DEFAULT_PAGE_SIZE``
            order_by: Optional order by clauses

        Returns:
            Page with model instances and paging counters
        """
        require_positive(page_num, "page_num")
        page_size = require_positive(
            settings.DEFAULT_PAGE_SIZE if page_size is None else page_size, "page_size"
        )
        conditions = self._conditions(filters)

        count_result = await self._execute(
            select(func.count()).select_from(self.model).filter(*conditions), "count"
        )
        record_count = count_result.scalar_one()

        query = select(self.model).filter(*conditions)
        if order_by:
            query = query.order_by(*order_by)
        query = query.offset((page_num - 1) * page_size).limit(page_size)

        result = await self._execute(query, "get page")
        return Page(
            results=list(result.scalars().all()),
            page_num=page_num,
            page_size=page_size,
            page_count=math.ceil(record_count / page_size),
            record_count=record_count,
        )

    async def update(self, id: Any, values: Mapping[str, Any]) -> bool:
        """Overwrite columns of a single record.

        Args:
            id: Primary key value
            values: Column name -> new value

        Returns:
            True if updated, False if not found
        """
        result = await self._execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**self._values(values))
            .execution_options(synchronize_session="evaluate"),
            "update",
        )
        await self._flush("update")
        return result.rowcount > 0

    async def remove(self, id: Any) -> bool:
        """Delete a single record by ID.

        Args:
            id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        result = await self._execute(
            delete(self.model)
            .where(self.model.id == id)
            .execution_options(synchronize_session="evaluate"),
            "remove",
        )
        await self._flush("remove")
        return result.rowcount > 0

    async def update_where(
        self, filters: Mapping[str, Any], values: Mapping[str, Any]
    ) -> int:
        """Update every record matching the filters in one statement.

        Args:
            filters: Column name -> required value
            values: Column name -> new value

        Returns:
            Number of updated rows

        Raises:
            ValueError: If filters is empty or names an unknown column
        """
        result = await self._execute(
            update(self.model)
            .where(*self._required_conditions(filters, "bulk update"))
            .values(**self._values(values))
            .execution_options(synchronize_session="evaluate"),
            "bulk update",
        )
        await self._flush("bulk update")
        return result.rowcount

    async def delete_where(self, filters: Mapping[str, Any]) -> int:
        """Delete every record matching the filters in one statement.

        Args:
            filters: Column name -> required value

        Returns:
            Number of deleted rows

        Raises:
            ValueError: If filters is empty or names an unknown column
        """
        result = await self._execute(
            delete(self.model)
            .where(*self._required_conditions(filters, "bulk delete"))
            .execution_options(synchronize_session="evaluate"),
            "bulk delete",
        )
        await self._flush("bulk delete")
        return result.rowcount
