# api/dashboard/views.py
"""
Dashboard and aggregate statistics endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import Catalog, CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import DashboardOverview
from . import db_manager

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/overview",
    response_model=DashboardOverview,
    summary="Get overview statistics",
)
async def get_overview_endpoint(
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
    department_id: int | None = Query(None, description="SuperAdmin only"),
    year: int | None = Query(None, ge=1, le=9998, description="Year of the monthly acquisition series; defaults to the current year"),
) -> DashboardOverview:
    """
    Asset counts per catalog status plus outstanding transfers and audits for
    the caller's department, and a per-month count of assets acquired in
    `year`. A SuperAdmin sees every department unless one is selected.
    """
    try:
        stats = await db_manager.get_overview_stats(
            db, catalog, current_principal, department_id, year
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return DashboardOverview(**stats)
