# api/assets/views.py
"""
Asset registry endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from api.audits import db_manager as audit_manager
from api.audits.models import AuditRead
from api.departments.db_manager import resolve_department_name
from api.locations.db_manager import resolve_location_name
from api.transfers import db_manager as transfer_manager
from api.transfers.models import TransferRead
from core.deps import Catalog, CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import (
    AssetCreate,
    AssetEdit,
    AssetRead,
    AssetStatusUpdate,
    AssetUpdate,
    BarcodeAudit,
    EditOutcome,
    LastUpdated,
)
from . import db_manager

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("", response_model=list[AssetRead], summary="List assets")
async def list_assets_endpoint(
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
    department_id: int | None = Query(None, description="SuperAdmin only; others always see their own department"),
) -> list[AssetRead]:
    """
    List assets visible to the caller. A caller without a department gets
    an empty list.
    """
    try:
        assets = await db_manager.list_assets(db, catalog, current_principal, department_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return [AssetRead(**a) for a in assets]


@router.get("/search", response_model=list[AssetRead], summary="Search assets")
async def search_assets_endpoint(
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
    q: str | None = Query(None, description="Substring matched case-insensitively"),
    department_id: int | None = Query(None),
) -> list[AssetRead]:
    try:
        assets = await db_manager.search_assets(db, catalog, current_principal, q, department_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return [AssetRead(**a) for a in assets]


@router.get("/last-updated", response_model=LastUpdated, summary="Latest asset modification time")
async def last_updated_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> LastUpdated:
    """Watermark for clients that poll the asset list."""
    last_updated = await db_manager.get_last_updated(db, current_principal)
    return LastUpdated(last_updated=last_updated)


@router.get("/barcode/{barcode}", response_model=AssetRead, summary="Find asset by barcode")
async def barcode_lookup_endpoint(
    barcode: str,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.find_by_barcode(db, catalog, barcode)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AssetRead(**asset)


@router.patch("/barcode/{barcode}/status", response_model=AuditRead, summary="Submit a counted status by barcode")
async def barcode_audit_endpoint(
    barcode: str,
    payload: BarcodeAudit,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AuditRead:
    """
    Scan-to-count. The status is filed as an unconfirmed audit; the asset
    itself is not changed until an Admin confirms it.
    """
    try:
        audit = await db_manager.submit_audit_by_barcode(
            db, catalog, current_principal, barcode, payload.status, payload.note
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AuditRead(**audit)


@router.get("/department/{department_id}", response_model=list[AssetRead], summary="List assets of a department")
async def list_by_department_endpoint(
    department_id: int,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> list[AssetRead]:
    try:
        assets = await db_manager.list_by_department(db, catalog, current_principal, department_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return [AssetRead(**a) for a in assets]


@router.post(
    "",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register an asset",
)
async def create_asset_endpoint(
    payload: AssetCreate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.create_asset(db, catalog, current_principal, payload.model_dump())
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AssetRead(**asset)


@router.get("/{asset_id}", response_model=AssetRead, summary="Get asset by ID")
async def get_asset_endpoint(
    asset_id: int,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.get_asset(db, catalog, asset_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AssetRead(**asset)


@router.put("/{asset_id}", response_model=EditOutcome, summary="Edit an asset")
async def edit_asset_endpoint(
    asset_id: int,
    payload: AssetEdit,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> EditOutcome:
    """
    Edit an asset of your department.

    Changing the department files a transfer request, changing the status
    files an audit; doing both in one request is rejected with 400.
    """
    changes = payload.model_dump(exclude_unset=True)
    department_name = changes.pop("department_name", None)
    location_name = changes.pop("location_name", None)

    try:
        if department_name:
            department = await resolve_department_name(db, department_name)
            changes["department_id"] = department.id
        if location_name:
            location = await resolve_location_name(db, location_name)
            changes["location_id"] = location.id

        asset, transfer_id, audit_id = await db_manager.edit_asset(
            db, catalog, current_principal, asset_id, changes
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return EditOutcome(asset=AssetRead(**asset), transfer_id=transfer_id, audit_id=audit_id)


@router.patch("/{asset_id}", response_model=AssetRead, summary="Update registry fields (SuperAdmin)")
async def update_asset_endpoint(
    asset_id: int,
    payload: AssetUpdate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.update_asset(
            db, catalog, current_principal, asset_id, payload.model_dump(exclude_unset=True)
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AssetRead(**asset)


@router.patch("/{asset_id}/status", response_model=AssetRead, summary="Set authoritative status (SuperAdmin)")
async def set_status_endpoint(
    asset_id: int,
    payload: AssetStatusUpdate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.set_status(db, catalog, current_principal, asset_id, payload.status)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AssetRead(**asset)


@router.delete("/{asset_id}", summary="Delete asset (SuperAdmin)")
async def delete_asset_endpoint(
    asset_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> dict:
    try:
        await db_manager.delete_asset(db, current_principal, asset_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return {"success": True}


@router.get("/{asset_id}/transfers", response_model=list[TransferRead], summary="Transfer history of an asset")
async def transfer_history_endpoint(
    asset_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> list[TransferRead]:
    transfers = await transfer_manager.get_asset_history(db, asset_id)
    return [TransferRead(**t) for t in transfers]


@router.get("/{asset_id}/audits", response_model=list[AuditRead], summary="Audit history of an asset")
async def audit_history_endpoint(
    asset_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> list[AuditRead]:
    audits = await audit_manager.get_asset_history(db, asset_id)
    return [AuditRead(**a) for a in audits]
