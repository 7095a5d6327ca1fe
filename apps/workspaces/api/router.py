from typing import Optional
from fastapi import APIRouter, Depends, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from apps.identity.api.router import EMAIL_PATTERN
from apps.identity.context import RequestContext, get_request_context
from ..service import WorkspaceService

router = APIRouter()


def clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not 2 <= len(v) <= 100:
        raise ValueError("must be 2-100 characters")
    return v


class MemberCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=6, max_length=72)
    role: str = "member"

    @field_validator("name")
    @classmethod
    def name_trimmed(cls, v: str) -> str:
        return clean_name(v)


class SettingsPatch(BaseModel):
    allow_invites: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("allow_invites", "allowInvites")
    )
    max_members: Optional[int] = Field(
        default=None, ge=1, le=1000, validation_alias=AliasChoices("max_members", "maxMembers")
    )


class WorkspaceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    settings: Optional[SettingsPatch] = None

    @field_validator("name")
    @classmethod
    def name_trimmed(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class RoleChange(BaseModel):
    role: str


def get_workspace_service(
    uow: UnitOfWork = Depends(get_uow),
    ctx: RequestContext = Depends(get_request_context),
) -> WorkspaceService:
    return WorkspaceService(uow, ctx)


@router.get("/current")
async def current_workspace(service: WorkspaceService = Depends(get_workspace_service)):
    return ResponseModel.success(data=await service.describe_current())


@router.get("/members")
async def list_members(service: WorkspaceService = Depends(get_workspace_service)):
    members = await service.list_members()
    data = [{**m.public_dict(), "created_at": m.created_at} for m in members]
    return ResponseModel.success(data=data, count=len(data))


@router.post("/create-member", status_code=status.HTTP_201_CREATED)
async def create_member(payload: MemberCreate, service: WorkspaceService = Depends(get_workspace_service)):
    """Owner (or admin, when invites are allowed) adds a teammate."""
    member = await service.create_member(payload.name, payload.email, payload.password, payload.role)
    return ResponseModel.success(message="Member created", data=member.public_dict())


@router.put("/settings")
async def update_settings(payload: WorkspaceUpdate, service: WorkspaceService = Depends(get_workspace_service)):
    """Owner only."""
    settings = payload.settings or SettingsPatch()
    workspace = await service.update_settings(
        name=payload.name,
        allow_invites=settings.allow_invites,
        max_members=settings.max_members,
    )
    return ResponseModel.success(
        message="Workspace updated successfully",
        data={
            "id": workspace.id,
            "name": workspace.name,
            "slug": workspace.slug,
            "settings": dict(workspace.settings or {}),
        },
    )


@router.patch("/members/{user_id}/role")
async def change_member_role(
    user_id: int,
    payload: RoleChange,
    service: WorkspaceService = Depends(get_workspace_service),
):
    user = await service.change_role(user_id, payload.role)
    return ResponseModel.success(message=f"User role updated to {user.role.value}", data=user.public_dict())


@router.delete("/members/{user_id}")
async def deactivate_member(user_id: int, service: WorkspaceService = Depends(get_workspace_service)):
    user = await service.deactivate_member(user_id)
    return ResponseModel.success(message="Member deactivated", data=user.public_dict())
