from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_user_service, get_current_user, require_roles
from app.db.schema import User, UserRole, AccountStatus
from app.models.common import APIResponse
from app.models.user import (
    UserRead, UserRoleUpdate, UserStatusUpdate, UserActivityStats
)
from app.services.user import UserService

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


@router.get(
    "",
    response_model=APIResponse[List[UserRead]],
    summary="List users",
    description="Admin view of all accounts, optionally filtered by role and status."
)
def list_users(
    role: Optional[UserRole] = None,
    account_status: Optional[AccountStatus] = Query(default=None, alias="status"),
    current_user: User = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    users = [UserRead.model_validate(u)
             for u in service.list_users(role, account_status)]
    return APIResponse(data=users, count=len(users))


@router.get(
    "/me/stats",
    response_model=APIResponse[UserActivityStats],
    summary="My contribution counters"
)
def get_my_stats(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return APIResponse(data=service.get_activity_stats(current_user))


@router.patch(
    "/{user_id}/role",
    response_model=APIResponse[UserRead],
    status_code=status.HTTP_200_OK,
    summary="Change a user's role"
)
def update_user_role(
    user_id: UUID,
    payload: UserRoleUpdate,
    current_user: User = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    user = service.update_role(current_user, user_id, payload.role)
    return APIResponse(data=UserRead.model_validate(user), message="User role updated")


@router.patch(
    "/{user_id}/status",
    response_model=APIResponse[UserRead],
    status_code=status.HTTP_200_OK,
    summary="Approve or deactivate an account"
)
def update_user_status(
    user_id: UUID,
    payload: UserStatusUpdate,
    current_user: User = Depends(admin_only),
    service: UserService = Depends(get_user_service)
):
    user = service.update_status(current_user, user_id, payload.status)
    return APIResponse(data=UserRead.model_validate(user), message="User status updated")
