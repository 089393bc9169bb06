# api/locations/views.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import LocationCreate, LocationRead, LocationUpdate
from . import db_manager

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("", response_model=list[LocationRead], summary="List locations")
async def list_locations_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> list[LocationRead]:
    locations = await db_manager.list_locations(db)
    return [LocationRead.model_validate(loc) for loc in locations]


@router.get("/{location_id}", response_model=LocationRead, summary="Get location by ID")
async def get_location_endpoint(
    location_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    try:
        location = await db_manager.get_location_by_id(db, location_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return LocationRead.model_validate(location)


@router.post(
    "",
    response_model=LocationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create location (SuperAdmin)",
)
async def create_location_endpoint(
    payload: LocationCreate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    try:
        location = await db_manager.create_location(db, current_principal, **payload.model_dump())
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return LocationRead.model_validate(location)


@router.put("/{location_id}", response_model=LocationRead, summary="Update location (SuperAdmin)")
async def update_location_endpoint(
    location_id: int,
    payload: LocationUpdate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    try:
        location = await db_manager.update_location(
            db, current_principal, location_id, **payload.model_dump()
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return LocationRead.model_validate(location)


@router.delete("/{location_id}", summary="Delete location (SuperAdmin)")
async def delete_location_endpoint(
    location_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> dict:
    try:
        await db_manager.delete_location(db, current_principal, location_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return {"success": True}
