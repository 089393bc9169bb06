# api/dashboard/db_manager.py
"""
Business logic for dashboard statistics.
"""
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from api.assets import queries as asset_queries
from api.transfers import queries as transfer_queries
from core.catalog import StatusCatalog
from core.clock import as_utc, utcnow
from core.errors import ValidationError
from core.policy import Principal, scoped_department
from . import queries

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _empty_months() -> list[dict]:
    return [
        {"month": index + 1, "label": label, "count": 0}
        for index, label in enumerate(MONTH_LABELS)
    ]


async def get_monthly_acquisitions(db: AsyncSession, year: int, department_id: int | None) -> list[dict]:
    """Assets acquired in each month of `year` (UTC), twelve entries."""
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    result = await db.execute(queries.select_acquired_between(start, end, department_id=department_id))

    months = _empty_months()
    for acquired_at in result.scalars().all():
        months[as_utc(acquired_at).month - 1]["count"] += 1
    return months


async def get_overview_stats(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    department_id: int | None = None,
    year: int | None = None,
) -> dict:
    """
    Scoped overview. Every catalog entry is listed, zero counts included.

    Without a department scope (SuperAdmin, no filter) incoming and outgoing
    both report the total number of pending transfers. `year` selects the
    monthly acquisition series and defaults to the current year.
    """
    if year is None:
        year = utcnow().year
    if not 1 <= year < 9999:
        raise ValidationError(f"Invalid year: {year}")

    visible, scope = scoped_department(principal, department_id)
    snapshot = await catalog.snapshot(db)

    if not visible:
        return {
            "department_id": None,
            "total_assets": 0,
            "status_breakdown": [
                {"value": e.value, "label": e.label, "color": e.color, "count": 0}
                for e in snapshot.values()
            ],
            "uncatalogued_assets": 0,
            "pending_transfers_in": 0,
            "pending_transfers_out": 0,
            "unconfirmed_audits": 0,
            "year": year,
            "monthly_acquisitions": _empty_months(),
        }

    # Total assets
    result = await db.execute(asset_queries.count_assets(department_id=scope))
    total_assets = result.scalar() or 0

    # Per-status counts
    result = await db.execute(asset_queries.count_assets_by_status(department_id=scope))
    by_status = {row.status: row.total for row in result.all()}
    status_breakdown = [
        {"value": e.value, "label": e.label, "color": e.color, "count": by_status.get(e.value, 0)}
        for e in snapshot.values()
    ]
    uncatalogued = sum(
        count for value, count in by_status.items()
        if value is not None and value not in snapshot
    )
    result = await db.execute(queries.count_assets_without_status(department_id=scope))
    uncatalogued += result.scalar() or 0

    # Pending transfers
    result = await db.execute(transfer_queries.count_pending(to_department_id=scope))
    pending_in = result.scalar() or 0
    result = await db.execute(transfer_queries.count_pending(from_department_id=scope))
    pending_out = result.scalar() or 0

    # Unconfirmed audits
    result = await db.execute(queries.count_unconfirmed_audits(department_id=scope))
    unconfirmed = result.scalar() or 0

    return {
        "department_id": scope,
        "total_assets": total_assets,
        "status_breakdown": status_breakdown,
        "uncatalogued_assets": uncatalogued,
        "pending_transfers_in": pending_in,
        "pending_transfers_out": pending_out,
        "unconfirmed_audits": unconfirmed,
        "year": year,
        "monthly_acquisitions": await get_monthly_acquisitions(db, year, scope),
    }
