# core/catalog.py
"""
Read-through cache over the status catalog.

Display resolution reads a snapshot that may lag behind a concurrent catalog
write; write paths validate status values against the live table instead.
Catalog writes call `invalidate()` after they commit.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ValidationError
from core.resolver import CatalogEntry
from db_models.status_value import StatusValue

logger = logging.getLogger(__name__)


class StatusCatalog:
    def __init__(self) -> None:
        self._entries: dict[str, CatalogEntry] | None = None

    async def snapshot(self, db: AsyncSession) -> dict[str, CatalogEntry]:
        """Catalog keyed by value, loaded on first use after an invalidation."""
        entries = self._entries
        if entries is None:
            result = await db.execute(select(StatusValue).order_by(StatusValue.id.asc()))
            entries = {
                row.value: CatalogEntry(value=row.value, label=row.label, color=row.color)
                for row in result.scalars().all()
            }
            self._entries = entries
            logger.debug("Status catalog loaded with %d entries", len(entries))
        return entries

    def invalidate(self) -> None:
        self._entries = None

    async def live_values(self, db: AsyncSession) -> list[str]:
        result = await db.execute(select(StatusValue.value).order_by(StatusValue.id.asc()))
        return list(result.scalars().all())

    async def validate(self, db: AsyncSession, value: str | None) -> str:
        """Check a status value against the live table. Returns it unchanged."""
        if value is None or not str(value).strip():
            raise ValidationError("Status is required")
        stmt = select(StatusValue.id).where(StatusValue.value == value)
        if (await db.execute(stmt)).scalar_one_or_none() is None:
            valid = await self.live_values(db)
            raise ValidationError(
                f"Invalid status: {value}. Valid statuses are: {', '.join(valid)}"
            )
        return value


status_catalog = StatusCatalog()


def get_status_catalog() -> StatusCatalog:
    """FastAPI dependency returning the process-wide catalog cache."""
    return status_catalog
