from fastapi import APIRouter, Depends

from todolist.core.modules.user.models import UserView
from todolist.web.deps import AppDep, IdentityDep, authenticate
from todolist.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"], dependencies=[Depends(authenticate)])


@router.get(
    "/auth/profile",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getProfile",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(app: AppDep, identity: IdentityDep) -> UserView:
    return await app.get_profile(identity)
