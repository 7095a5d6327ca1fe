"""
Role authorizer and resource ownership resolver.

Both are plain functions over (RequestContext, resource). Ownership checks
return an AccessResult pair instead of attaching anything to the request, and
the calling service decides what to do with a DENY.
"""

from enum import Enum
from typing import Any, NamedTuple
from framework.exceptions.handler import ForbiddenException
from .context import RequestContext
from .models import Role


class AccessLevel(str, Enum):
    OWNER_ONLY = "owner_only"
    OWNER_OR_ADMIN = "owner_or_admin"
    ANY_MEMBER = "any_member"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class AccessResult(NamedTuple):
    decision: Decision
    resource: Any

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW


def is_authorized(role: Role, level: AccessLevel) -> bool:
    """Pure role check, exhaustive over Role."""
    role = Role(role)
    if role is Role.OWNER:
        return True
    if role is Role.ADMIN:
        return level in (AccessLevel.OWNER_OR_ADMIN, AccessLevel.ANY_MEMBER)
    if role is Role.MEMBER:
        return level is AccessLevel.ANY_MEMBER
    raise ValueError(f"Unknown role: {role!r}")


def require_level(ctx: RequestContext, level: AccessLevel, message: str = None) -> None:
    if not is_authorized(ctx.role, level):
        if message is None:
            message = (
                "Access denied. Only workspace owners can perform this action."
                if level is AccessLevel.OWNER_ONLY
                else "Access denied. Requires owner or admin role."
            )
        raise ForbiddenException(message)


def _decide(allowed: bool, resource: Any) -> AccessResult:
    return AccessResult(Decision.ALLOW if allowed else Decision.DENY, resource)


def resolve_task_access(ctx: RequestContext, task) -> AccessResult:
    """Owner/admin, the creator, or the current assignee may modify a task."""
    allowed = (
        is_authorized(ctx.role, AccessLevel.OWNER_OR_ADMIN)
        or task.created_by == ctx.user_id
        or (task.assigned_to is not None and task.assigned_to == ctx.user_id)
    )
    return _decide(allowed, task)


def resolve_comment_edit(ctx: RequestContext, comment) -> AccessResult:
    """Only the author may edit a comment."""
    return _decide(comment.author_id == ctx.user_id, comment)


def resolve_comment_delete(ctx: RequestContext, comment) -> AccessResult:
    return _decide(
        comment.author_id == ctx.user_id or is_authorized(ctx.role, AccessLevel.OWNER_OR_ADMIN),
        comment,
    )


def check_role_change(ctx: RequestContext, target_role: Role, new_role: Role) -> None:
    """
    Raise ForbiddenException unless ctx may move a user from target_role to new_role.

    Owners are immutable; only owners promote to admin; members can't change roles.
    """
    require_level(ctx, AccessLevel.OWNER_OR_ADMIN)
    if Role(target_role) is Role.OWNER:
        raise ForbiddenException("Cannot change owner role")
    if Role(new_role) is Role.ADMIN and Role(ctx.role) is not Role.OWNER:
        raise ForbiddenException("Only workspace owner can promote users to admin")
