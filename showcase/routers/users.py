"""
User management API endpoints for the admin dashboard.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from uuid import UUID
import math

from showcase.models.user import User, UserRole
from showcase.services.user import UserService
from showcase.schemas.user import UserCreate, UserUpdate, UserResponse, UserListResponse
from showcase.utils.dependencies import get_current_staff_user, get_user_service
from showcase.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=UserListResponse,
    status_code=status.HTTP_200_OK,
    summary="List users",
    description="Paginated user list with optional role, status and text filters. Staff only.",
    responses=get_error_responses(401, 403, 422)
)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    is_active: Optional[bool] = Query(None, description="Filter by active status"),
    search: Optional[str] = Query(None, max_length=100, description="Username, email or name substring"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(20, ge=1, le=100, description="Number of users per page"),
    current_user: User = Depends(get_current_staff_user),
    user_service: UserService = Depends(get_user_service)
) -> UserListResponse:
    users, total = await user_service.list_users(
        role=role,
        is_active=is_active,
        search=search,
        page=page,
        page_size=page_size
    )

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total > 0 else 1
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create an account. Only an owner may create admin or owner accounts.",
    responses=get_error_responses(400, 401, 403, 409, 422)
)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(get_current_staff_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.create_user(user_data, current_user)
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get user",
    responses=get_error_responses(401, 403, 404)
)
async def get_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(get_current_staff_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    return UserResponse.model_validate(await user_service.get_user(user_id))


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update user",
    description="Update profile, role or status. Users cannot change their own role or deactivate themselves.",
    responses=get_crud_error_responses()
)
async def update_user(
    user_data: UserUpdate,
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(get_current_staff_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.update_user(user_id, user_data, current_user)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description="Delete an account. Users cannot delete themselves.",
    responses=get_error_responses(401, 403, 404)
)
async def delete_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(get_current_staff_user),
    user_service: UserService = Depends(get_user_service)
) -> None:
    await user_service.delete_user(user_id, current_user)
