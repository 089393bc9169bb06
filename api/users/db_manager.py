# api/users/db_manager.py
"""
Business logic for user records. Every write is SuperAdmin-only.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from api.departments.db_manager import get_department_by_id
from core.errors import ConflictError, NotFoundError, ValidationError
from core.policy import Action, Principal, require
from db import atomic
from db_models.user import User
from . import queries

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession, principal: Principal, skip: int = 0, limit: int = 100) -> tuple[list[User], int]:
    require(principal, Action.USER_MANAGE)
    total = (await db.execute(queries.count_users())).scalar() or 0
    result = await db.execute(queries.select_users(skip=skip, limit=limit))
    return list(result.scalars().all()), total


async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(queries.select_user_by_id(user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _check_department(db: AsyncSession, department_id: int | None) -> None:
    if department_id is None:
        return
    try:
        await get_department_by_id(db, department_id)
    except NotFoundError as exc:
        raise ValidationError(str(exc)) from exc


async def create_user(
    db: AsyncSession,
    principal: Principal,
    *,
    email: str,
    full_name: str,
    role: str,
    department_id: int | None = None,
) -> User:
    require(principal, Action.USER_MANAGE)

    async with atomic(db):
        if (await db.execute(queries.select_user_by_email(email))).scalar_one_or_none() is not None:
            raise ConflictError("Email already registered")
        await _check_department(db, department_id)

        user = User(
            email=email,
            full_name=full_name,
            role=role,
            department_id=department_id,
            is_active=True,
        )
        db.add(user)
        await db.flush()

    await db.refresh(user)
    logger.info("User %s (%s) created by user %s", user.id, role, principal.id)
    return user


async def update_user(db: AsyncSession, principal: Principal, user_id: int, updates: dict) -> User:
    """Apply the fields present in `updates`."""
    require(principal, Action.USER_MANAGE)

    async with atomic(db):
        user = await get_user_by_id(db, user_id)

        if updates.get("email") is not None:
            stmt = queries.select_user_by_email(updates["email"], exclude_id=user_id)
            if (await db.execute(stmt)).scalar_one_or_none() is not None:
                raise ConflictError("Email already in use")
            user.email = updates["email"]

        if updates.get("full_name") is not None:
            user.full_name = updates["full_name"]

        if updates.get("role") is not None:
            user.role = updates["role"]

        if "department_id" in updates:
            await _check_department(db, updates["department_id"])
            user.department_id = updates["department_id"]

        if updates.get("is_active") is not None:
            user.is_active = updates["is_active"]

    await db.refresh(user)
    logger.info("User %s updated by user %s", user_id, principal.id)
    return user
