from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from framework.logging.logger import get_logger
from framework.exceptions.handler import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from framework.repository.unit_of_work import UnitOfWork
from framework.security import get_password_hash
from apps.identity.context import RequestContext
from apps.identity.models import Plan, Role, User, Workspace
from apps.identity.permissions import AccessLevel, check_role_change, require_level
from apps.identity.repository import MemberRepository, UserRepository, WorkspaceRepository

logger = get_logger("workspace_service")

ASSIGNABLE_ROLES = (Role.MEMBER, Role.ADMIN)


def parse_assignable_role(value: Any) -> Role:
    """Roles that can be handed out; 'owner' is never one of them."""
    try:
        role = Role(value)
    except ValueError:
        role = None
    if role not in ASSIGNABLE_ROLES:
        raise ValidationException('Invalid role. Must be "member" or "admin"')
    return role


class WorkspaceService:
    """Workspace settings and membership management for the caller's workspace."""

    def __init__(self, uow: UnitOfWork, ctx: RequestContext):
        self.uow = uow
        self.ctx = ctx
        self.workspaces: WorkspaceRepository = uow.get_repository(WorkspaceRepository)
        self.members: MemberRepository = uow.get_repository(MemberRepository, workspace_id=ctx.workspace_id)

    async def get_workspace(self) -> Workspace:
        # Workspaces are addressed only through the caller's own id
        workspace = await self.workspaces.get_by_id(self.ctx.workspace_id)
        if workspace is None:
            raise NotFoundException("Workspace not found")
        return workspace

    async def _get_member(self, user_id: int) -> User:
        user = await self.members.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found in this workspace")
        return user

    async def describe_current(self) -> Dict:
        workspace = await self.get_workspace()
        members = await self.members.list_active()
        owner = next((m for m in members if m.id == workspace.owner_id), None)
        return {
            "id": workspace.id,
            "name": workspace.name,
            "slug": workspace.slug,
            "plan": Plan(workspace.plan).value,
            "settings": dict(workspace.settings or {}),
            "is_active": workspace.is_active,
            "owner": owner.public_dict() if owner else None,
            "members": [m.public_dict() for m in members],
            "created_at": workspace.created_at,
        }

    async def list_members(self) -> List[User]:
        return await self.members.list_active()

    async def create_member(self, name: str, email: str, password: str, role: Any = Role.MEMBER) -> User:
        """Add a teammate to the caller's workspace."""
        require_level(self.ctx, AccessLevel.OWNER_OR_ADMIN, "Only owners or admins can add members")
        role = parse_assignable_role(role)
        workspace = await self.get_workspace()

        if self.ctx.role is not Role.OWNER:
            if not workspace.allow_invites:
                raise ForbiddenException("Adding members is restricted to the workspace owner")
            if role is Role.ADMIN:
                raise ForbiddenException("Only workspace owner can promote users to admin")

        if await self.members.count_active() >= workspace.max_members:
            raise ValidationException(
                f"Workspace member limit reached ({workspace.max_members})"
            )

        email = email.strip().lower()
        if await self.uow.get_repository(UserRepository).email_exists(email):
            raise ConflictException("Email already exists", status_code=400)

        member = User(
            name=name.strip(),
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            workspace_id=self.ctx.workspace_id,
        )
        try:
            async with self.uow:
                await self.members.create(member)
                await self.uow.flush()
                workspace.add_member(member.id)
                await self.workspaces.update(workspace)
        except IntegrityError:
            raise ConflictException("Email already exists", status_code=400)

        logger.info(f"User {member.id} ({role.value}) added to workspace {workspace.id} by {self.ctx.user_id}")
        return member

    async def update_settings(
        self,
        name: Optional[str] = None,
        allow_invites: Optional[bool] = None,
        max_members: Optional[int] = None,
    ) -> Workspace:
        require_level(self.ctx, AccessLevel.OWNER_ONLY)
        workspace = await self.get_workspace()

        if name is not None:
            workspace.name = name.strip()
        if allow_invites is not None or max_members is not None:
            new_settings = dict(workspace.settings or {})
            if allow_invites is not None:
                new_settings["allow_invites"] = allow_invites
            if max_members is not None:
                new_settings["max_members"] = max_members
            workspace.settings = new_settings

        async with self.uow:
            await self.workspaces.update(workspace)
        logger.info(f"Workspace {workspace.id} settings updated by {self.ctx.user_id}")
        return workspace

    async def change_role(self, user_id: int, new_role: Any) -> User:
        require_level(self.ctx, AccessLevel.OWNER_OR_ADMIN)
        new_role = parse_assignable_role(new_role)
        user = await self._get_member(user_id)
        check_role_change(self.ctx, user.role, new_role)

        previous = Role(user.role)
        user.role = new_role
        async with self.uow:
            await self.members.update(user)
        logger.info(
            f"User {user.id} role {previous.value} -> {new_role.value} by {self.ctx.user_id} "
            f"in workspace {self.ctx.workspace_id}"
        )
        return user

    async def deactivate_member(self, user_id: int) -> User:
        """Soft-remove a member: the account stays, logins and tokens stop working."""
        require_level(self.ctx, AccessLevel.OWNER_OR_ADMIN)
        if user_id == self.ctx.user_id:
            raise ValidationException("You cannot deactivate your own account")

        user = await self._get_member(user_id)
        target_role = Role(user.role)
        if target_role is Role.OWNER:
            raise ForbiddenException("Cannot deactivate the workspace owner")
        if target_role is Role.ADMIN and self.ctx.role is not Role.OWNER:
            raise ForbiddenException("Only workspace owner can deactivate admins")

        workspace = await self.get_workspace()
        user.is_active = False
        workspace.remove_member(user.id)
        async with self.uow:
            await self.members.update(user)
            await self.workspaces.update(workspace)
        logger.info(f"User {user.id} deactivated in workspace {workspace.id} by {self.ctx.user_id}")
        return user
