# api/settings/views.py
"""
System settings endpoints. Only the edit window is configurable.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import EditWindowRead, EditWindowUpdate
from . import db_manager

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_read(window: db_manager.EditWindow) -> EditWindowRead:
    return EditWindowRead(
        start_at=window.start_at,
        end_at=window.end_at,
        active=window.is_active(),
    )


@router.get("/edit-window", response_model=EditWindowRead, summary="Get the edit window")
async def get_edit_window_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> EditWindowRead:
    window = await db_manager.get_edit_window(db)
    return _to_read(window)


@router.put("/edit-window", response_model=EditWindowRead, summary="Set the edit window (SuperAdmin)")
async def set_edit_window_endpoint(
    payload: EditWindowUpdate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> EditWindowRead:
    """
    Open, move or close the edit window. Send both bounds as null to close it.
    """
    try:
        window = await db_manager.set_edit_window(
            db,
            current_principal,
            start_at=payload.start_at,
            end_at=payload.end_at,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return _to_read(window)
