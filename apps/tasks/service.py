from datetime import datetime
from typing import Any, Dict, List, Optional
from framework.logging.logger import get_logger
from framework.exceptions.handler import ForbiddenException, NotFoundException, ValidationException
from framework.repository.unit_of_work import UnitOfWork
from apps.identity.context import RequestContext
from apps.identity.permissions import AccessResult, resolve_task_access
from apps.identity.repository import MemberRepository
from apps.comments.repository import CommentRepository
from .models import Task, TaskStatus, TaskPriority, utcnow
from .repository import TaskRepository

logger = get_logger("task_service")

OUTSIDE_WORKSPACE = "Cannot assign task to user outside your workspace"


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """Trim, drop blanks and de-duplicate while keeping order."""
    seen = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class TaskService:
    """Task CRUD for the caller's workspace."""

    def __init__(self, uow: UnitOfWork, ctx: RequestContext):
        self.uow = uow
        self.ctx = ctx
        self.tasks: TaskRepository = uow.get_repository(TaskRepository, workspace_id=ctx.workspace_id)
        self.members: MemberRepository = uow.get_repository(MemberRepository, workspace_id=ctx.workspace_id)

    async def _get_scoped(self, task_id: int) -> Task:
        task = await self.tasks.get_by_id(task_id)
        if task is None:
            raise NotFoundException("Task not found")
        return task

    async def _ensure_assignable(self, user_id: int) -> None:
        if await self.members.get_active(user_id) is None:
            raise ValidationException(OUTSIDE_WORKSPACE)

    async def resolve_for_mutation(self, task_id: int) -> AccessResult:
        """Load the task within the workspace and decide whether the caller may modify it."""
        task = await self._get_scoped(task_id)
        return resolve_task_access(self.ctx, task)

    async def _authorized_task(self, task_id: int) -> Task:
        access = await self.resolve_for_mutation(task_id)
        if not access.allowed:
            logger.warning(f"User {self.ctx.user_id} denied modification of task {task_id}")
            raise ForbiddenException("You do not have permission to modify this task")
        return access.resource

    async def list_tasks(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Task]:
        return await self.tasks.list_tasks(
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            search=search.strip() if search else None,
            limit=limit,
            offset=offset,
        )

    async def get_task(self, task_id: int) -> Task:
        return await self._get_scoped(task_id)

    async def get_stats(self) -> Dict[str, Any]:
        stats = await self.tasks.stats()
        total = stats["total"]
        stats["completion_rate"] = f"{stats['done'] / total * 100:.1f}%" if total else "0%"
        return stats

    async def create_task(
        self,
        title: str,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.TODO,
        due_date: Optional[datetime] = None,
        assigned_to: Optional[int] = None,
        tags: Optional[List[str]] = None,
    ) -> Task:
        if assigned_to is not None:
            await self._ensure_assignable(assigned_to)

        task = Task(
            title=title.strip(),
            description=(description or "").strip(),
            priority=priority,
            due_date=due_date,
            assigned_to=assigned_to,
            tags=normalize_tags(tags),
            created_by=self.ctx.user_id,
            workspace_id=self.ctx.workspace_id,
        )
        task.set_status(status)
        async with self.uow:
            await self.tasks.create(task)
            await self.uow.flush()
        logger.info(f"Task {task.id} created by user {self.ctx.user_id} in workspace {self.ctx.workspace_id}")
        return task

    async def update_task(self, task_id: int, changes: Dict[str, Any]) -> Task:
        """
        Apply a partial update. Only keys present in changes are touched;
        assigned_to=None unassigns.
        """
        task = await self._authorized_task(task_id)

        if "assigned_to" in changes:
            new_assignee = changes["assigned_to"]
            if new_assignee is not None and new_assignee != task.assigned_to:
                await self._ensure_assignable(new_assignee)

        if changes.get("title") is not None:
            task.title = changes["title"].strip()
        if "description" in changes:
            task.description = (changes["description"] or "").strip()
        if changes.get("status") is not None:
            task.set_status(changes["status"])
        if changes.get("priority") is not None:
            task.priority = TaskPriority(changes["priority"])
        if "due_date" in changes:
            task.due_date = changes["due_date"]
        if "assigned_to" in changes:
            task.assigned_to = changes["assigned_to"]
        if changes.get("tags") is not None:
            task.tags = normalize_tags(changes["tags"])
        task.updated_at = utcnow()

        async with self.uow:
            await self.tasks.update(task)
        logger.info(f"Task {task.id} updated by user {self.ctx.user_id}")
        return task

    async def delete_task(self, task_id: int) -> Task:
        task = await self._authorized_task(task_id)
        comments = self.uow.get_repository(CommentRepository, workspace_id=self.ctx.workspace_id)
        async with self.uow:
            await comments.delete_for_task(task.id)
            await self.tasks.delete(task)
        logger.info(f"Task {task.id} deleted by user {self.ctx.user_id}")
        return task
