from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from todolist.core.modules.access.models import AuthView
from todolist.web.deps import AppDep, IdentityDep, authenticate
from todolist.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    """Account registration request."""

    # Empty defaults: missing fields are reported by the application as a 400, not by FastAPI as a 422
    name: str = Field("", description="Display name")
    email: str = Field("", description="Email address, unique across accounts")
    password: str = Field("", description="Password, at least 6 characters")
    image: str | None = Field(None, description="Optional profile image reference")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field("", description="Email address of the account")
    password: str = Field("", description="Password of the account")


@router.post(
    "/auth/register",
    summary="Register account",
    description="Create an account and receive a bearer token for it.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
    },
)
async def register(request: RegisterRequest, app: AppDep) -> AuthView:
    return await app.register(request.name, request.email, request.password, request.image)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a bearer token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing fields"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(request: LoginRequest, app: AppDep) -> AuthView:
    return await app.login(request.email, request.password)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Revoke the session of the presented bearer token.",
    operation_id="logout",
    status_code=204,
    dependencies=[Depends(authenticate)],
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, identity: IdentityDep) -> None:
    await app.logout(identity)
