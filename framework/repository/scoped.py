"""
Workspace-scoped repository: every read is filtered by, and every write is
anchored to, the workspace fixed at construction time.
"""

from typing import Type, TypeVar
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from .base import BaseRepository

T = TypeVar("T", bound=SQLModel)


class WorkspaceScopedRepository(BaseRepository[T]):
    """Repository for tenant-owned models (those with a ``workspace_id`` column)."""

    def __init__(self, session: AsyncSession, model: Type[T], workspace_id: int):
        if workspace_id is None:
            raise ValueError(f"{model.__name__} repository requires a workspace_id")
        super().__init__(session, model)
        self.workspace_id = workspace_id

    def _where(self, statement, **filters):
        # Caller-supplied workspace_id is replaced, not trusted
        filters["workspace_id"] = self.workspace_id
        return super()._where(statement, **filters)

    def scope(self, statement):
        """Add the workspace filter to a hand-built statement."""
        return statement.where(self.model.workspace_id == self.workspace_id)

    def _check_anchor(self, entity: T) -> None:
        if entity.workspace_id != self.workspace_id:
            raise ValueError(
                f"{self.model.__name__} {entity.id} belongs to workspace {entity.workspace_id}, "
                f"not {self.workspace_id}"
            )

    async def create(self, entity: T) -> T:
        entity.workspace_id = self.workspace_id
        return await super().create(entity)

    async def update(self, entity: T) -> T:
        self._check_anchor(entity)
        return await super().update(entity)

    async def delete(self, entity: T) -> None:
        self._check_anchor(entity)
        await super().delete(entity)
