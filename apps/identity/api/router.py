from fastapi import APIRouter, Depends, Response, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from framework.config import settings
from ..context import RequestContext, get_request_context
from ..service import IdentityService, issue_token, workspace_summary

router = APIRouter()

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterSchema(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=6, max_length=72)
    workspace_name: str = Field(
        min_length=2, max_length=100, validation_alias=AliasChoices("workspace_name", "workspaceName")
    )

    @field_validator("name", "workspace_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if len(v.strip()) < 2:
            raise ValueError("must be at least 2 characters")
        return v


class LoginSchema(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


def get_identity_service(uow: UnitOfWork = Depends(get_uow)) -> IdentityService:
    """Dependency: create IdentityService."""
    return IdentityService(uow)


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterSchema,
    response: Response,
    service: IdentityService = Depends(get_identity_service)
):
    """Register a new workspace and its owner."""
    user, workspace = await service.register_workspace_owner(
        data.name, data.email, data.password, data.workspace_name
    )
    token = issue_token(user)
    _set_token_cookie(response, token)
    return ResponseModel.success(
        message="Registration successful",
        data={
            "user": user.public_dict(),
            "workspace": workspace_summary(workspace),
            "token": token,
        },
    )


@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: IdentityService = Depends(get_identity_service)
):
    """Login: return JWT and set cookie."""
    user, workspace = await service.authenticate_user(data.email, data.password)
    token = issue_token(user)
    _set_token_cookie(response, token)
    return ResponseModel.success(
        message="Login successful",
        data={
            "user": user.public_dict(),
            "workspace": workspace_summary(workspace),
            "token": token,
            "token_type": "bearer",
        },
    )


@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(message="Logged out successfully")


@router.get("/me")
async def me(
    ctx: RequestContext = Depends(get_request_context),
    service: IdentityService = Depends(get_identity_service),
):
    return ResponseModel.success(data=await service.get_profile(ctx))
