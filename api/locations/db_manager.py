# api/locations/db_manager.py
"""
Business logic for asset locations.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError, ValidationError
from core.policy import Action, Principal, require
from db import atomic
from db_models.location import Location
from . import queries

logger = logging.getLogger(__name__)


async def list_locations(db: AsyncSession) -> list[Location]:
    result = await db.execute(queries.select_all_locations())
    return list(result.scalars().all())


async def get_location_by_id(db: AsyncSession, location_id: int) -> Location:
    result = await db.execute(queries.select_location_by_id(location_id))
    location = result.scalar_one_or_none()
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    return location


async def resolve_location_name(db: AsyncSession, name: str) -> Location:
    result = await db.execute(queries.select_location_by_name(name))
    location = result.scalar_one_or_none()
    if location is None:
        raise ValidationError(f"Invalid location name: {name}")
    return location


async def create_location(
    db: AsyncSession,
    principal: Principal,
    *,
    name: str,
    description: str | None = None,
    address: str | None = None,
) -> Location:
    require(principal, Action.LOCATION_WRITE)

    async with atomic(db):
        location = Location(name=name, description=description, address=address)
        db.add(location)
        await db.flush()

    logger.info("Location '%s' created by user %s", name, principal.id)
    return location


async def update_location(
    db: AsyncSession,
    principal: Principal,
    location_id: int,
    *,
    name: str,
    description: str | None = None,
    address: str | None = None,
) -> Location:
    require(principal, Action.LOCATION_WRITE)

    async with atomic(db):
        location = await get_location_by_id(db, location_id)
        location.name = name
        location.description = description
        location.address = address

    logger.info("Location %s updated by user %s", location_id, principal.id)
    return location


async def delete_location(db: AsyncSession, principal: Principal, location_id: int) -> None:
    """Raises ValidationError while any asset is placed at the location."""
    require(principal, Action.LOCATION_WRITE)

    async with atomic(db):
        location = await get_location_by_id(db, location_id)
        assets = (await db.execute(queries.count_assets_at_location(location_id))).scalar() or 0
        if assets:
            raise ValidationError(
                f"Cannot delete location: It is being used by {assets} asset(s)"
            )
        await db.delete(location)

    logger.info("Location %s deleted by user %s", location_id, principal.id)
