from sqlmodel import SQLModel, Field
from typing import Optional, Dict
from datetime import datetime, timezone


class Comment(SQLModel, table=True):
    __tablename__ = "comments"

    id: Optional[int] = Field(default=None, primary_key=True)
    content: str = Field(max_length=1000)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    # Copied from the parent task at creation
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)
    author_id: int = Field(foreign_key="users.id", index=True)
    is_edited: bool = Field(default=False)
    edited_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "content": self.content,
            "task_id": self.task_id,
            "workspace_id": self.workspace_id,
            "author_id": self.author_id,
            "is_edited": self.is_edited,
            "edited_at": self.edited_at,
            "created_at": self.created_at,
        }
