# api/audits/views.py
"""
Audit workflow endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import Catalog, CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import AuditConfirm, AuditConfirmResult, AuditCreate, AuditPage, AuditRead
from . import db_manager

router = APIRouter(prefix="/audits", tags=["audits"])


@router.post(
    "",
    response_model=AuditRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an audit",
)
async def submit_audit_endpoint(
    payload: AuditCreate,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AuditRead:
    """
    Record the status observed for an asset during a count. The asset shows
    as "Pending" until the audit is confirmed.
    """
    try:
        audit = await db_manager.submit_audit(
            db,
            catalog,
            current_principal,
            asset_id=payload.asset_id,
            status=payload.status,
            note=payload.note,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AuditRead(**audit)


@router.get("", response_model=AuditPage, summary="List audits")
async def list_audits_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
    department_id: int | None = Query(None, description="SuperAdmin only"),
    asset_id: int | None = Query(None),
    confirmed: int | None = Query(None, description="0 or 1"),
    skip: int = 0,
    limit: int = 50,
) -> AuditPage:
    try:
        items, total = await db_manager.list_audits(
            db,
            current_principal,
            department_id=department_id,
            asset_id=asset_id,
            confirmed=confirmed,
            skip=skip,
            limit=limit,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AuditPage(total=total, items=[AuditRead(**a) for a in items])


@router.post("/confirm", response_model=AuditConfirmResult, summary="Confirm a batch of audits")
async def confirm_audits_endpoint(
    payload: AuditConfirm,
    current_principal: CurrentPrincipal,
    catalog: Catalog,
    db: AsyncSession = Depends(get_session),
) -> AuditConfirmResult:
    """
    Confirm audits by id. Already-confirmed ids are accepted; an unknown id
    fails the whole batch.
    """
    try:
        confirmed = await db_manager.confirm_audits(db, catalog, current_principal, payload.ids)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AuditConfirmResult(requested=len(set(payload.ids)), confirmed=confirmed)


@router.get("/{audit_id}", response_model=AuditRead, summary="Get audit by ID")
async def get_audit_endpoint(
    audit_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> AuditRead:
    try:
        audit = await db_manager.get_audit(db, audit_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return AuditRead(**audit)
