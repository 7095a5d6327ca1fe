"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type, Any
from sqlmodel import SQLModel, select, func
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T", bound=SQLModel)


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create entity."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Update entity."""
        pass

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Delete entity."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository implementation with SQLModel CRUD; subclasses can add custom queries."""

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    def _where(self, statement, **filters: Any):
        """Apply equality filters. Unknown field names are an error, never silently dropped."""
        for key, value in filters.items():
            column = getattr(self.model, key, None)
            if column is None:
                raise AttributeError(f"{self.model.__name__} has no field '{key}'")
            statement = statement.where(column == value)
        return statement

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID (unscoped)."""
        return await self.find_one(id=id)

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Update entity (SQLModel tracks changes)."""
        self.session.add(entity)
        return entity

    async def delete(self, entity: T) -> None:
        await self.session.delete(entity)

    async def find_one(self, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. email='a@x.com')."""
        statement = self._where(select(self.model), **filters)
        result = await self.session.exec(statement)
        return result.first()

    async def find_all(self, order_by=None, **filters) -> List[T]:
        """Find entities by filters, optionally ordered."""
        statement = self._where(select(self.model), **filters)
        if order_by is not None:
            statement = statement.order_by(order_by)
        result = await self.session.exec(statement)
        return list(result.all())

    async def exists(self, **filters) -> bool:
        statement = self._where(select(self.model.id), **filters).limit(1)
        result = await self.session.exec(statement)
        return result.first() is not None

    async def count(self, **filters) -> int:
        """Count entities matching filters."""
        statement = self._where(select(func.count(self.model.id)), **filters)
        result = await self.session.exec(statement)
        return result.one()
