# api/statuses/db_manager.py
"""
Business logic for the status catalog.

Catalog writes are SuperAdmin-only. A value still used by an asset or by an
unconfirmed audit can neither be deleted nor renamed; label and color are free.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.catalog import StatusCatalog
from core.errors import ConflictError, NotFoundError, ValidationError
from core.policy import Action, Principal, require
from db import atomic
from db_models.status_value import StatusValue
from . import queries

logger = logging.getLogger(__name__)


async def list_statuses(db: AsyncSession) -> list[StatusValue]:
    result = await db.execute(queries.select_all_statuses())
    return list(result.scalars().all())


async def get_status_by_id(db: AsyncSession, status_id: int) -> StatusValue:
    """Get a status by ID. Raises NotFoundError if missing."""
    result = await db.execute(queries.select_status_by_id(status_id))
    status_value = result.scalar_one_or_none()
    if status_value is None:
        raise NotFoundError(f"Status {status_id} not found")
    return status_value


async def _usage_counts(db: AsyncSession, value: str) -> tuple[int, int]:
    assets = (await db.execute(queries.count_assets_with_status(value))).scalar() or 0
    audits = (await db.execute(queries.count_unconfirmed_audits_with_status(value))).scalar() or 0
    return assets, audits


def _usage_message(value: str, assets: int, audits: int) -> str:
    reasons = []
    if assets:
        reasons.append(f"{assets} asset(s)")
    if audits:
        reasons.append(f"{audits} unconfirmed audit(s)")
    return f"Status '{value}' is being used by {' and '.join(reasons)}"


async def create_status(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    *,
    value: str,
    label: str,
    color: str | None = None,
) -> StatusValue:
    """
    Add a catalog entry. Color falls back to the configured neutral gray.

    Raises:
        AuthorizationError: caller is not a SuperAdmin
        ConflictError: value already exists
    """
    require(principal, Action.CATALOG_WRITE)

    async with atomic(db):
        existing = (await db.execute(queries.select_status_by_value(value))).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(f"Status '{value}' already exists")

        status_value = StatusValue(
            value=value,
            label=label,
            color=color or settings.DEFAULT_STATUS_COLOR,
        )
        db.add(status_value)
        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Status '{value}' already exists") from exc

    catalog.invalidate()
    logger.info("Status '%s' created by user %s", value, principal.id)
    await db.refresh(status_value)
    return status_value


async def update_status(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    status_id: int,
    *,
    value: str,
    label: str,
    color: str | None = None,
) -> StatusValue:
    """
    Replace value, label and color of an entry.

    Raises:
        NotFoundError: unknown id
        ValidationError: renaming a value that assets or unconfirmed audits still use
        ConflictError: the new value collides with another entry
    """
    require(principal, Action.CATALOG_WRITE)

    async with atomic(db):
        status_value = await get_status_by_id(db, status_id)

        if value != status_value.value:
            assets, audits = await _usage_counts(db, status_value.value)
            if assets or audits:
                raise ValidationError(
                    "Cannot rename status: " + _usage_message(status_value.value, assets, audits)
                )
            clash = (await db.execute(queries.select_status_by_value(value))).scalar_one_or_none()
            if clash is not None:
                raise ConflictError(f"Status '{value}' already exists")

        status_value.value = value
        status_value.label = label
        status_value.color = color or settings.DEFAULT_STATUS_COLOR
        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Status '{value}' already exists") from exc

    catalog.invalidate()
    logger.info("Status %s updated to '%s' by user %s", status_id, value, principal.id)
    return status_value


async def delete_status(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    status_id: int,
) -> None:
    """
    Remove an entry that nothing references.

    Raises:
        NotFoundError: unknown id
        ValidationError: the value is still in use
    """
    require(principal, Action.CATALOG_WRITE)

    async with atomic(db):
        status_value = await get_status_by_id(db, status_id)
        assets, audits = await _usage_counts(db, status_value.value)
        if assets or audits:
            raise ValidationError(
                "Cannot delete status: " + _usage_message(status_value.value, assets, audits)
            )
        await db.delete(status_value)

    catalog.invalidate()
    logger.info("Status %s deleted by user %s", status_id, principal.id)
