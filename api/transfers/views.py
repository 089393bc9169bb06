# api/transfers/views.py
"""
Transfer workflow endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentPrincipal
from core.errors import AssetServiceError, http_error
from .models import TransferCreate, TransferRead
from . import db_manager

router = APIRouter(prefix="/transfers", tags=["transfers"])


@router.post(
    "",
    response_model=TransferRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request an asset transfer",
)
async def request_transfer_endpoint(
    payload: TransferCreate,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> TransferRead:
    """
    Ask for an asset of your department to move to another department.
    The asset shows as "Transferring" until the destination resolves it.
    """
    try:
        transfer = await db_manager.request_transfer(
            db,
            current_principal,
            asset_id=payload.asset_id,
            to_department_id=payload.to_department_id,
            note=payload.note,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return TransferRead(**transfer)


@router.get("", response_model=list[TransferRead], summary="List transfers")
async def list_transfers_endpoint(
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
    direction: str | None = Query(None, description="'in' (incoming) or 'out' (outgoing)"),
    status_filter: str | None = Query(None, alias="status", description="pending, approved, rejected or all"),
    department_id: int | None = Query(None, description="SuperAdmin only"),
    asset_id: int | None = Query(None),
) -> list[TransferRead]:
    try:
        transfers = await db_manager.list_transfers(
            db,
            current_principal,
            direction=direction,
            status=status_filter,
            department_id=department_id,
            asset_id=asset_id,
        )
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return [TransferRead(**t) for t in transfers]


@router.get("/{transfer_id}", response_model=TransferRead, summary="Get transfer by ID")
async def get_transfer_endpoint(
    transfer_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> TransferRead:
    try:
        transfer = await db_manager.get_transfer(db, transfer_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return TransferRead(**transfer)


@router.post("/{transfer_id}/approve", response_model=TransferRead, summary="Approve a pending transfer")
async def approve_transfer_endpoint(
    transfer_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> TransferRead:
    """
    Move the asset to the destination department. Approving a transfer that
    is no longer pending returns 404.
    """
    try:
        transfer = await db_manager.approve_transfer(db, current_principal, transfer_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return TransferRead(**transfer)


@router.post("/{transfer_id}/reject", response_model=TransferRead, summary="Reject a pending transfer")
async def reject_transfer_endpoint(
    transfer_id: int,
    current_principal: CurrentPrincipal,
    db: AsyncSession = Depends(get_session),
) -> TransferRead:
    try:
        transfer = await db_manager.reject_transfer(db, current_principal, transfer_id)
    except AssetServiceError as exc:
        raise http_error(exc) from exc
    return TransferRead(**transfer)
