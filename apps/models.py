"""
Model registration for migrations: import all models that should be migrated by Alembic here.
When adding/removing apps, add/remove the corresponding imports here; no need to change alembic/env.py.
"""
from apps.identity.models import Workspace, User
from apps.tasks.models import Task
from apps.comments.models import Comment

__all__ = ["Workspace", "User", "Task", "Comment"]
