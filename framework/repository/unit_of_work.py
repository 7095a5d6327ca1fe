"""
Unit of Work: manages repositories and transaction boundaries.
"""

from typing import Optional
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.database.manager import get_db


class UnitOfWork:
    """Manages related repositories with a shared session and transaction commit/rollback."""

    def __init__(self, session: Optional[AsyncSession] = None):
        if session is None:
            raise ValueError("Session must be provided, e.g. UnitOfWork(session=db).")

        self.session = session
        self._repositories = {}

    def get_repository(self, repo_class, workspace_id: Optional[int] = None):
        """
        Get or create a repository instance (cached per workspace).

        Workspace-scoped repositories take the caller's workspace_id; global
        ones (users by email, workspaces by slug) are built without it.
        """
        cache_key = (repo_class.__name__, workspace_id)
        if cache_key not in self._repositories:
            if workspace_id is None:
                self._repositories[cache_key] = repo_class(self.session)
            else:
                self._repositories[cache_key] = repo_class(self.session, workspace_id)
        return self._repositories[cache_key]

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def flush(self) -> None:
        """Flush session (e.g. to get auto-increment IDs)."""
        await self.session.flush()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()


def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    """Dependency: create UnitOfWork."""
    return UnitOfWork(session=db)
