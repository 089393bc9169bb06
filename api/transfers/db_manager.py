# api/transfers/db_manager.py
"""
Transfer workflow: requests to move an asset between departments.

A transfer starts pending and ends approved or rejected; see
core.workflow.TRANSFER_TRANSITIONS. Approval moves the asset, rejection
leaves it alone. Resolution is a compare-and-swap on the pending state so two
concurrent resolutions cannot both apply.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.assets import queries as asset_queries
from api.departments import queries as department_queries
from api.settings.db_manager import get_edit_window, has_edited_in_window, record_edit
from core.clock import utcnow
from core.errors import ConflictError, NotFoundError, ValidationError
from core.policy import Action, Principal, Resource, require, scoped_department
from core.workflow import TransferEvent, TransferStatus, transfer_transition
from db import atomic
from db_models.asset import Asset
from db_models.asset_transfer import AssetTransfer
from . import queries

logger = logging.getLogger(__name__)

DIRECTIONS = ("in", "out")


def transfer_to_dict(row) -> dict:
    transfer: AssetTransfer = row.AssetTransfer
    return {
        "id": transfer.id,
        "asset_id": transfer.asset_id,
        "asset_name": row.asset_name,
        "asset_code": row.asset_code,
        "from_department_id": transfer.from_department_id,
        "from_department_name": row.from_department_name,
        "to_department_id": transfer.to_department_id,
        "to_department_name": row.to_department_name,
        "requested_by": transfer.requested_by,
        "requested_by_name": row.requested_by_name,
        "status": transfer.status,
        "note": transfer.note,
        "requested_at": transfer.requested_at,
        "approved_by": transfer.approved_by,
        "approved_by_name": row.approved_by_name,
        "approved_at": transfer.approved_at,
    }


async def get_transfer(db: AsyncSession, transfer_id: int) -> dict:
    result = await db.execute(queries.select_transfer_read_by_id(transfer_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Transfer {transfer_id} not found")
    return transfer_to_dict(row)


async def stage_transfer(
    db: AsyncSession,
    principal: Principal,
    asset: Asset,
    to_department_id: int,
    note: str | None = None,
) -> AssetTransfer:
    """
    Add a pending transfer for an asset the caller already locked and was
    authorized to edit. Flushes, never commits.

    Raises:
        ValidationError: target is the current department or does not exist
        ConflictError: the asset already has a pending transfer
    """
    if to_department_id == asset.department_id:
        raise ValidationError("Asset already belongs to this department")

    target = await db.execute(department_queries.select_department_by_id(to_department_id))
    if target.scalar_one_or_none() is None:
        raise ValidationError(f"Department {to_department_id} not found")

    pending = await db.execute(queries.select_pending_for_asset(asset.id))
    if pending.first() is not None:
        raise ConflictError(f"Asset {asset.id} already has a pending transfer")

    transfer = AssetTransfer(
        asset_id=asset.id,
        from_department_id=asset.department_id,
        to_department_id=to_department_id,
        requested_by=principal.id,
        status=TransferStatus.PENDING.value,
        note=note,
        requested_at=utcnow(),
    )
    db.add(transfer)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(f"Asset {asset.id} already has a pending transfer") from exc
    return transfer


async def request_transfer(
    db: AsyncSession,
    principal: Principal,
    *,
    asset_id: int,
    to_department_id: int,
    note: str | None = None,
) -> dict:
    """Create a pending transfer for an asset of the caller's department."""
    async with atomic(db):
        asset = (await db.execute(asset_queries.select_asset_for_update(asset_id))).scalar_one_or_none()
        if asset is None:
            raise NotFoundError(f"Asset {asset_id} not found")

        window = await get_edit_window(db)
        edited = await has_edited_in_window(db, principal, asset.id, window)
        require(principal, Action.TRANSFER_REQUEST, Resource(asset.department_id, edited))

        transfer = await stage_transfer(db, principal, asset, to_department_id, note)
        record_edit(db, principal, asset.id, window)

    logger.info(
        "Transfer %s requested for asset %s: department %s -> %s by user %s",
        transfer.id, asset_id, transfer.from_department_id, to_department_id, principal.id,
    )
    return await get_transfer(db, transfer.id)


async def _resolve(
    db: AsyncSession,
    principal: Principal,
    transfer_id: int,
    event: TransferEvent,
) -> dict:
    async with atomic(db):
        transfer = (await db.execute(queries.select_transfer_for_update(transfer_id))).scalar_one_or_none()
        if transfer is None:
            raise NotFoundError(f"Transfer {transfer_id} not found")

        target = transfer_transition(transfer.status, event)
        require(principal, Action.TRANSFER_RESOLVE, Resource(transfer.to_department_id))

        result = await db.execute(
            queries.resolve_transfer(transfer_id, target, principal.id, utcnow())
        )
        if result.rowcount != 1:
            raise ConflictError(f"Transfer {transfer_id} was resolved by another request")

        if target == TransferStatus.APPROVED:
            moved = await db.execute(
                queries.move_asset(transfer.asset_id, transfer.to_department_id)
            )
            if moved.rowcount != 1:
                raise NotFoundError(f"Asset {transfer.asset_id} no longer exists")

    logger.info(
        "Transfer %s %s by user %s (asset %s)",
        transfer_id, target.value, principal.id, transfer.asset_id,
    )
    return await get_transfer(db, transfer_id)


async def approve_transfer(db: AsyncSession, principal: Principal, transfer_id: int) -> dict:
    """
    Approve a pending transfer and move the asset to the destination department.

    Raises:
        NotFoundError: unknown transfer, or it is no longer pending
        AuthorizationError: caller is not an Admin of the destination department
        ConflictError: a concurrent request resolved it first
    """
    return await _resolve(db, principal, transfer_id, TransferEvent.APPROVE)


async def reject_transfer(db: AsyncSession, principal: Principal, transfer_id: int) -> dict:
    """Reject a pending transfer. The asset is not touched."""
    return await _resolve(db, principal, transfer_id, TransferEvent.REJECT)


async def list_transfers(
    db: AsyncSession,
    principal: Principal,
    *,
    direction: str | None = None,
    status: str | None = None,
    department_id: int | None = None,
    asset_id: int | None = None,
) -> list[dict]:
    """
    Department-scoped transfer list.

    `direction` is relative to the caller's department (or `department_id` for
    a SuperAdmin): "in" for incoming, "out" for outgoing. `status` "all" or
    None disables the status filter.
    """
    if direction is not None and direction not in DIRECTIONS:
        raise ValidationError("direction must be 'in' or 'out'")
    if status == "all":
        status = None
    if status is not None:
        try:
            status = TransferStatus(status).value
        except ValueError as exc:
            raise ValidationError(f"Invalid transfer status: {status}") from exc

    visible, scope = scoped_department(principal, department_id)
    if not visible:
        return []

    result = await db.execute(
        queries.select_transfers(
            department_id=scope,
            direction=direction,
            status=status,
            asset_id=asset_id,
        )
    )
    return [transfer_to_dict(row) for row in result.all()]


async def get_asset_history(db: AsyncSession, asset_id: int) -> list[dict]:
    """Full transfer history of an asset, newest first. Not department-scoped."""
    result = await db.execute(queries.select_asset_history(asset_id))
    return [transfer_to_dict(row) for row in result.all()]
