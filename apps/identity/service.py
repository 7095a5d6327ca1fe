from datetime import timedelta
from typing import Dict, Optional, Tuple
from loguru import logger
from sqlalchemy.exc import IntegrityError
from framework.config import settings
from framework.exceptions.handler import (
    BusinessException,
    ConflictException,
    NotFoundException,
    UnauthenticatedException,
)
from framework.repository.unit_of_work import UnitOfWork
from framework.security import create_access_token, get_password_hash, verify_password
from apps.workspaces.slug import generate_unique_slug
from .context import RequestContext
from .models import Role, User, Workspace
from .repository import UserRepository, WorkspaceRepository


def issue_token(user: User) -> str:
    return create_access_token(
        data={"sub": str(user.id), "workspace_id": user.workspace_id},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def workspace_summary(workspace: Workspace) -> Dict:
    return {"id": workspace.id, "name": workspace.name, "slug": workspace.slug}


class IdentityService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def register_workspace_owner(
        self, name: str, email: str, password: str, workspace_name: str
    ) -> Tuple[User, Workspace]:
        """
        Register a new workspace together with its owning user.

        Workspace shell, owner and owner back-reference are written in one
        transaction: a failure at any step rolls everything back, so no
        owner-less workspace is ever committed.
        """
        workspace_repo = self.uow.get_repository(WorkspaceRepository)
        user_repo = self.uow.get_repository(UserRepository)
        email = email.strip().lower()

        if await user_repo.email_exists(email):
            raise ConflictException("Email already registered", status_code=400)

        try:
            slug = await generate_unique_slug(workspace_name, workspace_repo.slug_exists)
            workspace = Workspace(name=workspace_name.strip(), slug=slug)
            await workspace_repo.create(workspace)
            await self.uow.flush()

            user = User(
                name=name.strip(),
                email=email,
                hashed_password=get_password_hash(password),
                workspace_id=workspace.id,
                role=Role.OWNER,
            )
            await user_repo.create(user)
            await self.uow.flush()

            workspace.owner_id = user.id
            workspace.members = [user.id]
            await workspace_repo.update(workspace)
            await self.uow.commit()
        except BusinessException:
            await self.uow.rollback()
            raise
        except IntegrityError as e:
            await self.uow.rollback()
            error_msg = str(e.orig) if hasattr(e, "orig") else str(e)
            if "email" in error_msg.lower():
                logger.warning(f"Concurrent registration for {email}")
                raise ConflictException("Email already registered", status_code=400)
            if "slug" in error_msg.lower():
                raise ConflictException("Workspace name is taken, please try again")
            logger.error(f"Database integrity error during registration: {error_msg}")
            raise BusinessException("Registration failed: data conflict", status_code=409)
        except Exception as e:
            await self.uow.rollback()
            logger.opt(exception=True).error(f"Failed to register workspace {workspace_name!r}: {e}")
            raise BusinessException("Server error during registration", status_code=500)

        logger.info(f"Workspace {workspace.slug} (id={workspace.id}) created with owner {user.id}")
        return user, workspace

    async def authenticate_user(self, email: str, password: str) -> Tuple[User, Workspace]:
        """Check credentials; returns the user and their workspace."""
        user_repo = self.uow.get_repository(UserRepository)
        workspace_repo = self.uow.get_repository(WorkspaceRepository)

        user = await user_repo.get_by_email(email.strip().lower())
        if not user or not verify_password(password, user.hashed_password):
            logger.info(f"Failed login for {email}")
            raise UnauthenticatedException("Invalid email or password")
        if not user.is_active:
            raise UnauthenticatedException("Account is deactivated. Contact your administrator.")

        workspace = await workspace_repo.get_by_id(user.workspace_id)
        if workspace is None or not workspace.is_active:
            raise UnauthenticatedException("Workspace is deactivated. Contact support.")

        logger.info(f"User {user.id} authenticated in workspace {workspace.id}")
        return user, workspace

    async def get_profile(self, ctx: RequestContext) -> Dict:
        workspace: Optional[Workspace] = await self.uow.get_repository(WorkspaceRepository).get_by_id(
            ctx.workspace_id
        )
        if workspace is None:
            raise NotFoundException("Workspace not found")
        return {
            "user": {
                "id": ctx.user_id,
                "name": ctx.name,
                "email": ctx.email,
                "role": ctx.role.value,
            },
            "workspace": workspace_summary(workspace),
        }
