# commentlens/infrastructure/repositories/base.py
"""
Base Repository Pattern
Provides generic CRUD operations for all entities
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar, cast

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """
    Repository with generic CRUD operations

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, User, id_field="uid")
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType], id_field: str = "id"):
        """
        Initialize repository

        Args:
            session: Database session
            model: SQLAlchemy model class
            id_field: Name of the primary key attribute
        """
        self.session = session
        self.model = model
        self.id_field = id_field

    def _id_col(self) -> InstrumentedAttribute:
        return cast(InstrumentedAttribute, getattr(self.model, self.id_field))

    # ========================================================================
    # CREATE Operations
    # ========================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Create new entity

        Args:
            **kwargs: Model attributes

        Returns:
            Created model instance
        """
        try:
            instance = cast(Any, self.model)(**kwargs)
            self.session.add(instance)
            await self.session.commit()
            await self.session.refresh(instance)
            logger.info(
                f"✅ Created {self.model.__name__}: {getattr(instance, self.id_field, 'N/A')}"
            )
            return instance
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to create {self.model.__name__}: {e}")
            raise

    # ========================================================================
    # READ Operations
    # ========================================================================

    async def get_by_id(self, id: str) -> Optional[ModelType]:
        """
        Get entity by ID

        Returns:
            Model instance or None
        """
        try:
            return await self.session.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to get {self.model.__name__} by ID: {e}")
            raise

    async def find_by(self, order_by: Optional[Any] = None, **filters) -> List[ModelType]:
        """
        Find entities by filters

        Args:
            order_by: Optional ORDER BY clause
            **filters: Field-value pairs to filter by

        Returns:
            List of matching model instances
        """
        try:
            query = select(self.model)
            for key, value in filters.items():
                if hasattr(self.model, key):
                    query = query.where(getattr(self.model, key) == value)
            if order_by is not None:
                query = query.order_by(order_by)

            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to find {self.model.__name__}: {e}")
            raise

    async def find_one_by(self, **filters) -> Optional[ModelType]:
        """Find single entity by filters"""
        try:
            query = select(self.model)
            for key, value in filters.items():
                if hasattr(self.model, key):
                    query = query.where(getattr(self.model, key) == value)

            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to find one {self.model.__name__}: {e}")
            raise

    # ========================================================================
    # UPDATE Operations
    # ========================================================================

    async def update(self, id: str, **kwargs) -> Optional[ModelType]:
        """
        Update entity by ID

        Returns:
            Updated model instance or None
        """
        try:
            stmt = update(self.model).where(self._id_col() == id).values(**kwargs)
            await self.session.execute(stmt)
            await self.session.commit()
            updated = await self.get_by_id(id)
            if updated is not None:
                await self.session.refresh(updated)
            logger.info(f"✅ Updated {self.model.__name__}: {id}")
            return updated
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to update {self.model.__name__}: {e}")
            raise

