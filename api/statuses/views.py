# api/statuses/views.py
"""
Status catalog endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import Catalog, CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import StatusCreate, StatusRead, StatusUpdate
from . import db_manager

router = APIRouter(prefix="/statuses", tags=["statuses"])


@router.get("", response_model=list[StatusRead], summary="List status catalog")
async def list_statuses_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> list[StatusRead]:
    statuses = await db_manager.list_statuses(db)
    return [StatusRead.model_validate(s) for s in statuses]


@router.get("/{status_id}", response_model=StatusRead, summary="Get status by ID")
async def get_status_endpoint(
    status_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> StatusRead:
    try:
        status_value = await db_manager.get_status_by_id(db, status_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return StatusRead.model_validate(status_value)


@router.post(
    "",
    response_model=StatusRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create status (SuperAdmin)",
)
async def create_status_endpoint(
    payload: StatusCreate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> StatusRead:
    try:
        status_value = await db_manager.create_status(
            db,
            catalog,
            current_principal,
            value=payload.value,
            label=payload.label,
            color=payload.color,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return StatusRead.model_validate(status_value)


@router.put("/{status_id}", response_model=StatusRead, summary="Update status (SuperAdmin)")
async def update_status_endpoint(
    status_id: int,
    payload: StatusUpdate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> StatusRead:
    try:
        status_value = await db_manager.update_status(
            db,
            catalog,
            current_principal,
            status_id,
            value=payload.value,
            label=payload.label,
            color=payload.color,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return StatusRead.model_validate(status_value)


@router.delete("/{status_id}", summary="Delete status (SuperAdmin)")
async def delete_status_endpoint(
    status_id: int,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> dict:
    try:
        await db_manager.delete_status(db, catalog, current_principal, status_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return {"success": True}
