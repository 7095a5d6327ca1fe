"""Identity module repository implementations."""

from typing import Optional, List
from framework.repository.base import BaseRepository
from framework.repository.scoped import WorkspaceScopedRepository
from .models import Workspace, User


class WorkspaceRepository(BaseRepository[Workspace]):
    """Workspace repository (workspaces are the scope, so lookups are by id or slug)."""

    def __init__(self, session):
        super().__init__(session, Workspace)

    async def slug_exists(self, slug: str) -> bool:
        return await self.exists(slug=slug)


class UserRepository(BaseRepository[User]):
    """
    Global user lookups. Only email uniqueness checks and login go through
    here; everything acting on behalf of a caller uses MemberRepository.
    """

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.find_one(email=email)

    async def email_exists(self, email: str) -> bool:
        return await self.exists(email=email)


class MemberRepository(WorkspaceScopedRepository[User]):
    """Users of one workspace."""

    def __init__(self, session, workspace_id: int):
        super().__init__(session, User, workspace_id)

    async def list_active(self) -> List[User]:
        return await self.find_all(order_by=User.created_at, is_active=True)

    async def count_active(self) -> int:
        return await self.count(is_active=True)

    async def get_active(self, user_id: int) -> Optional[User]:
        return await self.find_one(id=user_id, is_active=True)
