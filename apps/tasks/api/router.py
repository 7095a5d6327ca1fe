from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from apps.identity.context import RequestContext, get_request_context
from ..models import TaskStatus, TaskPriority
from ..service import TaskService

router = APIRouter()

TITLE_MIN, TITLE_MAX = 3, 200


def clean_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not TITLE_MIN <= len(v) <= TITLE_MAX:
        raise ValueError(f"must be {TITLE_MIN}-{TITLE_MAX} characters")
    return v


class TaskCreate(BaseModel):
    # workspace_id and created_by come from the caller context, never from the body
    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = Field(default="", max_length=2000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("due_date", "dueDate"))
    assigned_to: Optional[int] = Field(default=None, validation_alias=AliasChoices("assigned_to", "assignedTo"))
    tags: List[str] = Field(default_factory=list, max_length=50)

    @field_validator("title")
    @classmethod
    def title_trimmed(cls, v: Optional[str]) -> Optional[str]:
        return clean_title(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("due_date", "dueDate"))
    assigned_to: Optional[int] = Field(default=None, validation_alias=AliasChoices("assigned_to", "assignedTo"))
    tags: Optional[List[str]] = Field(default=None, max_length=50)

    @field_validator("title")
    @classmethod
    def title_trimmed(cls, v: Optional[str]) -> Optional[str]:
        return clean_title(v)


def get_task_service(
    uow: UnitOfWork = Depends(get_uow),
    ctx: RequestContext = Depends(get_request_context),
) -> TaskService:
    """Dependency: create TaskService."""
    return TaskService(uow, ctx)


@router.get("")
async def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[int] = Query(default=None, alias="assignedTo"),
    assigned_to_snake: Optional[int] = Query(default=None, alias="assigned_to", include_in_schema=False),
    search: Optional[str] = Query(default=None, max_length=200),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    service: TaskService = Depends(get_task_service)
):
    """List workspace tasks, newest first."""
    tasks = await service.list_tasks(
        status=status,
        priority=priority,
        assigned_to=assigned_to if assigned_to is not None else assigned_to_snake,
        search=search,
        limit=limit,
        offset=offset,
    )
    return ResponseModel.success(data=[t.to_dict() for t in tasks], count=len(tasks))


@router.get("/stats/overview")
async def task_stats(service: TaskService = Depends(get_task_service)):
    return ResponseModel.success(data=await service.get_stats())


@router.get("/{task_id}")
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    task = await service.get_task(task_id)
    return ResponseModel.success(data=task.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)):
    task = await service.create_task(
        title=payload.title,
        description=payload.description or "",
        status=payload.status,
        priority=payload.priority,
        due_date=payload.due_date,
        assigned_to=payload.assigned_to,
        tags=payload.tags,
    )
    return ResponseModel.success(message="Task created successfully", data=task.to_dict())


@router.put("/{task_id}")
async def update_task(task_id: int, payload: TaskUpdate, service: TaskService = Depends(get_task_service)):
    task = await service.update_task(task_id, payload.model_dump(exclude_unset=True))
    return ResponseModel.success(message="Task updated successfully", data=task.to_dict())


@router.delete("/{task_id}")
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    task = await service.delete_task(task_id)
    return ResponseModel.success(message="Task deleted successfully", data=task.to_dict())
