from datetime import datetime, timezone
from typing import List
from framework.logging.logger import get_logger
from framework.exceptions.handler import ForbiddenException, NotFoundException, ValidationException
from framework.repository.unit_of_work import UnitOfWork
from apps.identity.context import RequestContext
from apps.identity.permissions import resolve_comment_delete, resolve_comment_edit
from apps.tasks.models import Task
from apps.tasks.repository import TaskRepository
from .models import Comment
from .repository import CommentRepository

logger = get_logger("comment_service")

MAX_COMMENT_LENGTH = 1000


def clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationException("Comment content is required")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationException(
            "Validation error", errors=[f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters"]
        )
    return content


class CommentService:
    def __init__(self, uow: UnitOfWork, ctx: RequestContext):
        self.uow = uow
        self.ctx = ctx
        self.comments: CommentRepository = uow.get_repository(CommentRepository, workspace_id=ctx.workspace_id)
        self.tasks: TaskRepository = uow.get_repository(TaskRepository, workspace_id=ctx.workspace_id)

    async def _get_task(self, task_id: int) -> Task:
        task = await self.tasks.get_by_id(task_id)
        if task is None:
            raise NotFoundException("Task not found")
        return task

    async def _get_comment(self, comment_id: int) -> Comment:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundException("Comment not found")
        return comment

    async def list_for_task(self, task_id: int) -> List[Comment]:
        await self._get_task(task_id)
        return await self.comments.list_for_task(task_id)

    async def count_for_task(self, task_id: int) -> int:
        await self._get_task(task_id)
        return await self.comments.count_for_task(task_id)

    async def add_comment(self, task_id: int, content: str) -> Comment:
        content = clean_content(content)
        task = await self._get_task(task_id)
        comment = Comment(
            content=content,
            task_id=task.id,
            workspace_id=task.workspace_id,
            author_id=self.ctx.user_id,
        )
        async with self.uow:
            await self.comments.create(comment)
            await self.uow.flush()
        logger.info(f"Comment {comment.id} added to task {task.id} by user {self.ctx.user_id}")
        return comment

    async def edit_comment(self, comment_id: int, content: str) -> Comment:
        content = clean_content(content)
        access = resolve_comment_edit(self.ctx, await self._get_comment(comment_id))
        if not access.allowed:
            raise ForbiddenException("You can only edit your own comments")

        comment = access.resource
        comment.content = content
        comment.is_edited = True
        comment.edited_at = datetime.now(timezone.utc)
        async with self.uow:
            await self.comments.update(comment)
        return comment

    async def delete_comment(self, comment_id: int) -> Comment:
        access = resolve_comment_delete(self.ctx, await self._get_comment(comment_id))
        if not access.allowed:
            raise ForbiddenException("You do not have permission to delete this comment")

        comment = access.resource
        async with self.uow:
            await self.comments.delete(comment)
        logger.info(f"Comment {comment.id} deleted by user {self.ctx.user_id}")
        return comment
