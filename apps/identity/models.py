from sqlmodel import SQLModel, Field, JSON, Column
from typing import Optional, Dict, List
from datetime import datetime, timezone
from enum import Enum
from framework.config import settings as app_settings


class Role(str, Enum):
    """Workspace-scoped authorization level."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


def default_workspace_settings() -> Dict:
    return {
        "allow_invites": True,
        "max_members": app_settings.DEFAULT_MAX_MEMBERS,
    }


class Workspace(SQLModel, table=True):
    """Tenant: the isolation boundary for users, tasks and comments."""
    __tablename__ = "workspaces"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(unique=True, index=True, max_length=120)
    # Null only between the first and last step of registration
    owner_id: Optional[int] = Field(default=None, index=True)
    members: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    plan: Plan = Field(default=Plan.FREE)
    settings: Dict = Field(default_factory=default_workspace_settings, sa_column=Column(JSON))
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def allow_invites(self) -> bool:
        return bool((self.settings or {}).get("allow_invites", True))

    @property
    def max_members(self) -> int:
        return int((self.settings or {}).get("max_members", app_settings.DEFAULT_MAX_MEMBERS))

    def add_member(self, user_id: int) -> None:
        # Reassign so the JSON column registers the change
        if user_id not in (self.members or []):
            self.members = [*(self.members or []), user_id]

    def remove_member(self, user_id: int) -> None:
        self.members = [m for m in (self.members or []) if m != user_id]


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    email: str = Field(unique=True, index=True, max_length=320)
    hashed_password: str
    role: Role = Field(default=Role.MEMBER)
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def public_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": Role(self.role).value,
        }
