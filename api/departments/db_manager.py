# api/departments/db_manager.py
"""
Business logic for departments.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError, ValidationError
from core.policy import Action, Principal, require
from db import atomic
from db_models.department import Department
from . import queries

logger = logging.getLogger(__name__)


async def list_departments(db: AsyncSession) -> list[Department]:
    result = await db.execute(queries.select_all_departments())
    return list(result.scalars().all())


async def get_department_by_id(db: AsyncSession, department_id: int) -> Department:
    result = await db.execute(queries.select_department_by_id(department_id))
    department = result.scalar_one_or_none()
    if department is None:
        raise NotFoundError(f"Department {department_id} not found")
    return department


async def resolve_department_name(db: AsyncSession, name: str) -> Department:
    """Look a department up by native name first, then alternate name."""
    result = await db.execute(queries.select_department_by_name(name))
    department = result.scalar_one_or_none()
    if department is None:
        raise ValidationError(f"Invalid department name: {name}")
    return department


async def create_department(
    db: AsyncSession,
    principal: Principal,
    *,
    name_native: str,
    name_alt: str | None = None,
    description: str | None = None,
) -> Department:
    require(principal, Action.DEPARTMENT_WRITE)

    async with atomic(db):
        department = Department(
            name_native=name_native,
            name_alt=name_alt,
            description=description,
        )
        db.add(department)
        await db.flush()

    logger.info("Department '%s' created by user %s", name_native, principal.id)
    return department


async def update_department(
    db: AsyncSession,
    principal: Principal,
    department_id: int,
    *,
    name_native: str,
    name_alt: str | None = None,
    description: str | None = None,
) -> Department:
    require(principal, Action.DEPARTMENT_WRITE)

    async with atomic(db):
        department = await get_department_by_id(db, department_id)
        department.name_native = name_native
        department.name_alt = name_alt
        department.description = description

    logger.info("Department %s updated by user %s", department_id, principal.id)
    return department


async def delete_department(db: AsyncSession, principal: Principal, department_id: int) -> None:
    """
    Delete a department nothing points at.

    Raises:
        ValidationError: assets or users still reference the department
    """
    require(principal, Action.DEPARTMENT_WRITE)

    async with atomic(db):
        department = await get_department_by_id(db, department_id)

        assets = (await db.execute(queries.count_assets_in_department(department_id))).scalar() or 0
        users = (await db.execute(queries.count_users_in_department(department_id))).scalar() or 0
        if assets or users:
            raise ValidationError(
                f"Cannot delete department: It is being used by {assets} asset(s) and {users} user(s)"
            )

        await db.delete(department)

    logger.info("Department %s deleted by user %s", department_id, principal.id)
