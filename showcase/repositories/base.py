"""
Generic async repository shared by every table of the showcase.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete, func
from showcase.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    CRUD operations keyed by the UUID primary key.

    Every write commits; a failed write rolls the session back and re-raises.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def _commit(self, db_obj: Optional[ModelType] = None) -> None:
        try:
            await self.db.commit()
            if db_obj is not None:
                await self.db.refresh(db_obj)
        except Exception:
            await self.db.rollback()
            raise

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        try:
            await self._commit(db_obj)
        except SQLAlchemyError as e:
            logger.error(f"Insert into {self.model_name} failed: {e}")
            raise

        logger.debug(f"{self.model_name} {db_obj.id} created")
        return db_obj

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        Page through records.

        Args:
            skip: Offset into the ordered result
            limit: Page size
            filters: Column equality filters; list values become IN clauses
            order_by: Column name, '-' prefix for descending; newest first when omitted
        """
        query = self._apply_filters(select(self.model), filters)

        column_name = (order_by or "").lstrip("-")
        if column_name and hasattr(self.model, column_name):
            column = getattr(self.model, column_name)
            query = query.order_by(column.desc() if order_by.startswith("-") else column.asc())
        else:
            query = query.order_by(self.model.created_at.desc())

        result = await self.db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def update(
        self,
        id: uuid.UUID,
        obj_in: Dict[str, Any],
        skip_none: bool = True
    ) -> Optional[ModelType]:
        """
        Apply ``obj_in`` to the record with ``id``.

        Keys that are not columns are ignored. With ``skip_none`` a None value
        leaves the column untouched; without it the column is cleared.

        Returns:
            The refreshed record, or None when no record has that id
        """
        db_obj = await self.get_by_id(id)
        if db_obj is None:
            return None

        changes = {
            key: value for key, value in obj_in.items()
            if hasattr(self.model, key) and not (skip_none and value is None)
        }
        if not changes:
            return db_obj

        for key, value in changes.items():
            setattr(db_obj, key, value)

        try:
            await self._commit(db_obj)
        except SQLAlchemyError as e:
            logger.error(f"Update of {self.model_name} {id} failed: {e}")
            raise

        logger.debug(f"{self.model_name} {id} updated: {sorted(changes)}")
        return db_obj

    async def delete(self, id: uuid.UUID) -> bool:
        """Delete by id; False when nothing matched."""
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        try:
            await self._commit()
        except SQLAlchemyError as e:
            logger.error(f"Delete of {self.model_name} {id} failed: {e}")
            raise

        return result.rowcount > 0

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = self._apply_filters(select(func.count(self.model.id)), filters)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model_name}")

        result = await self.db.execute(select(self.model).where(getattr(self.model, field) == value))
        return result.scalar_one_or_none()

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]]):
        for field, value in (filters or {}).items():
            if not hasattr(self.model, field):
                continue
            column = getattr(self.model, field)
            query = query.where(column.in_(value) if isinstance(value, (list, tuple)) else column == value)
        return query
