"""
Session identity resolution.

Turns a bearer credential into an explicit RequestContext that routers hand to
services. Nothing is stashed on request.state; the context is the only
carrier of "who is calling, in which workspace".
"""

from typing import Optional
from fastapi import Depends
from pydantic import BaseModel
from framework.exceptions.handler import UnauthenticatedException
from framework.logging.logger import get_logger
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.security import decode_access_token, get_token_from_request
from .models import Role, Workspace
from .repository import MemberRepository, WorkspaceRepository

logger = get_logger("identity_context")


class RequestContext(BaseModel):
    """Identity of the caller, loaded fresh from storage for every request."""
    user_id: int
    workspace_id: int
    role: Role
    name: str
    email: str


async def resolve_identity(uow: UnitOfWork, token: Optional[str]) -> RequestContext:
    """
    Verify the token and load the acting user.

    Missing/expired/forged tokens, deleted or deactivated users and users who
    moved workspace all raise the same UnauthenticatedException.
    """
    claims = decode_access_token(token)
    try:
        user_id = int(claims.get("sub"))
        workspace_id = int(claims.get("workspace_id"))
    except (TypeError, ValueError):
        raise UnauthenticatedException()

    members = uow.get_repository(MemberRepository, workspace_id=workspace_id)
    user = await members.get_active(user_id)
    if user is None:
        logger.info(f"Rejected token for user {user_id} in workspace {workspace_id}")
        raise UnauthenticatedException()

    workspace: Optional[Workspace] = await uow.get_repository(WorkspaceRepository).get_by_id(workspace_id)
    if workspace is None or not workspace.is_active:
        raise UnauthenticatedException()

    return RequestContext(
        user_id=user.id,
        workspace_id=user.workspace_id,
        role=Role(user.role),
        name=user.name,
        email=user.email,
    )


async def get_request_context(
    uow: UnitOfWork = Depends(get_uow),
    token: Optional[str] = Depends(get_token_from_request),
) -> RequestContext:
    """Dependency: authenticated caller. Use as ctx: RequestContext = Depends(get_request_context)."""
    return await resolve_identity(uow, token)
