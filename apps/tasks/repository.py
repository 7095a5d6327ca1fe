"""Task module repository implementation."""

from typing import Dict, List, Optional
from sqlalchemy import case, or_
from sqlmodel import select, func
from framework.repository.scoped import WorkspaceScopedRepository
from .models import Task, TaskStatus, TaskPriority


class TaskRepository(WorkspaceScopedRepository[Task]):
    """Tasks of one workspace."""

    def __init__(self, session, workspace_id: int):
        super().__init__(session, Task, workspace_id)

    async def list_tasks(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Task]:
        """List tasks newest first with optional filters; search matches title or description."""
        statement = self.scope(select(Task))

        if status:
            statement = statement.where(Task.status == status)
        if priority:
            statement = statement.where(Task.priority == priority)
        if assigned_to is not None:
            statement = statement.where(Task.assigned_to == assigned_to)
        if search:
            pattern = f"%{search.lower()}%"
            statement = statement.where(
                or_(
                    func.lower(Task.title).like(pattern),
                    func.lower(Task.description).like(pattern),
                )
            )

        statement = statement.order_by(Task.created_at.desc(), Task.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.exec(statement)
        return list(result.all())

    async def stats(self) -> Dict[str, int]:
        """Counts by status and by high/urgent priority, in one query."""

        def count_if(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        statement = self.scope(
            select(
                func.count(Task.id),
                count_if(Task.status == TaskStatus.TODO),
                count_if(Task.status == TaskStatus.IN_PROGRESS),
                count_if(Task.status == TaskStatus.REVIEW),
                count_if(Task.status == TaskStatus.DONE),
                count_if(Task.priority == TaskPriority.HIGH),
                count_if(Task.priority == TaskPriority.URGENT),
            )
        )
        result = await self.session.exec(statement)
        total, todo, in_progress, review, done, high, urgent = result.one()
        return {
            "total": int(total or 0),
            "todo": int(todo),
            "in_progress": int(in_progress),
            "review": int(review),
            "done": int(done),
            "high_priority": int(high),
            "urgent": int(urgent),
        }
