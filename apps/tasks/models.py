from sqlmodel import SQLModel, Field, Column, JSON
from typing import Optional, List, Dict
from datetime import datetime, timezone
from enum import Enum


class TaskStatus(str, Enum):
    """Task status enum."""
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(SQLModel, table=True):
    """Task owned by exactly one workspace."""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=2000)
    status: TaskStatus = Field(default=TaskStatus.TODO, index=True)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: Optional[datetime] = Field(default=None)

    # Tenant anchor: set once on create, never reassigned
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)
    created_by: int = Field(foreign_key="users.id", index=True)
    assigned_to: Optional[int] = Field(default=None, foreign_key="users.id", index=True)

    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, description="Created at")
    updated_at: datetime = Field(default_factory=utcnow, description="Updated at")

    def set_status(self, status: TaskStatus) -> None:
        """Change status and keep completed_at in step with it."""
        status = TaskStatus(status)
        if status == TaskStatus.DONE:
            if self.completed_at is None:
                self.completed_at = utcnow()
        else:
            self.completed_at = None
        self.status = status

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": TaskStatus(self.status).value,
            "priority": TaskPriority(self.priority).value,
            "due_date": self.due_date,
            "workspace_id": self.workspace_id,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "tags": list(self.tags or []),
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
