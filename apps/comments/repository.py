"""Comment repository implementation."""

from typing import List
from sqlmodel import select, delete
from framework.repository.scoped import WorkspaceScopedRepository
from .models import Comment


class CommentRepository(WorkspaceScopedRepository[Comment]):
    """Comments of one workspace."""

    def __init__(self, session, workspace_id: int):
        super().__init__(session, Comment, workspace_id)

    async def list_for_task(self, task_id: int) -> List[Comment]:
        """Oldest first, like a conversation."""
        statement = (
            self.scope(select(Comment))
            .where(Comment.task_id == task_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def count_for_task(self, task_id: int) -> int:
        return await self.count(task_id=task_id)

    async def delete_for_task(self, task_id: int) -> None:
        statement = self.scope(delete(Comment)).where(Comment.task_id == task_id)
        await self.session.execute(statement)
