# api/users/views.py
"""
Current-user profile and user management endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentPrincipal, CurrentUser
from core.errors import AssetServiceError, http_error
from core.policy import Action, require
from .models import UserCreate, UserListResponse, UserResponse, UserUpdate
from . import db_manager

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.get("", response_model=UserListResponse, summary="List all users (SuperAdmin)")
async def list_users_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
    skip: int = 0,
    limit: int = 100,
) -> UserListResponse:
    try:
        users, total = await db_manager.list_users(db, current_principal, skip=skip, limit=limit)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=total,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user (SuperAdmin)",
)
async def create_user_endpoint(
    payload: UserCreate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    try:
        user = await db_manager.create_user(db, current_principal, **payload.model_dump())
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID (SuperAdmin)")
async def get_user_endpoint(
    user_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    try:
        require(current_principal, Action.USER_MANAGE)
        user = await db_manager.get_user_by_id(db, user_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, summary="Update user (SuperAdmin)")
async def update_user_endpoint(
    user_id: int,
    payload: UserUpdate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    try:
        user = await db_manager.update_user(
            db, current_principal, user_id, payload.model_dump(exclude_unset=True)
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user)
