# api/transfers/queries.py
"""
SQLAlchemy query builders for asset transfers.
"""
from datetime import datetime

from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import aliased

from db_models.asset import Asset
from db_models.asset_transfer import AssetTransfer
from db_models.department import Department
from db_models.user import User
from core.workflow import TransferStatus

FromDepartment = aliased(Department)
ToDepartment = aliased(Department)
Requester = aliased(User)
Approver = aliased(User)


def select_transfer_reads():
    """Transfers joined with the names shown alongside them."""
    return (
        select(
            AssetTransfer,
            Asset.name.label("asset_name"),
            Asset.code.label("asset_code"),
            FromDepartment.name_native.label("from_department_name"),
            ToDepartment.name_native.label("to_department_name"),
            Requester.full_name.label("requested_by_name"),
            Approver.full_name.label("approved_by_name"),
        )
        .outerjoin(Asset, Asset.id == AssetTransfer.asset_id)
        .outerjoin(FromDepartment, FromDepartment.id == AssetTransfer.from_department_id)
        .outerjoin(ToDepartment, ToDepartment.id == AssetTransfer.to_department_id)
        .outerjoin(Requester, Requester.id == AssetTransfer.requested_by)
        .outerjoin(Approver, Approver.id == AssetTransfer.approved_by)
    )


def select_transfer_read_by_id(transfer_id: int):
    # Reload even when the row is already in the session; resolution writes bypass the ORM.
    return (
        select_transfer_reads()
        .where(AssetTransfer.id == transfer_id)
        .execution_options(populate_existing=True)
    )


def select_transfers(
    department_id: int | None = None,
    direction: str | None = None,
    status: str | None = None,
    asset_id: int | None = None,
):
    """
    direction "in" keeps rows arriving at `department_id`, "out" rows leaving
    it; without a direction both sides match.
    """
    stmt = select_transfer_reads()

    if department_id is not None:
        if direction == "in":
            stmt = stmt.where(AssetTransfer.to_department_id == department_id)
        elif direction == "out":
            stmt = stmt.where(AssetTransfer.from_department_id == department_id)
        else:
            stmt = stmt.where(
                or_(
                    AssetTransfer.to_department_id == department_id,
                    AssetTransfer.from_department_id == department_id,
                )
            )

    if status is not None:
        stmt = stmt.where(AssetTransfer.status == status)
    if asset_id is not None:
        stmt = stmt.where(AssetTransfer.asset_id == asset_id)

    return stmt.order_by(AssetTransfer.requested_at.desc(), AssetTransfer.id.desc())


def select_asset_history(asset_id: int):
    return (
        select_transfer_reads()
        .where(AssetTransfer.asset_id == asset_id)
        .order_by(AssetTransfer.requested_at.desc(), AssetTransfer.id.desc())
    )


def select_transfer_for_update(transfer_id: int):
    return select(AssetTransfer).where(AssetTransfer.id == transfer_id).with_for_update()


def select_pending_for_asset(asset_id: int):
    return select(AssetTransfer.id).where(
        AssetTransfer.asset_id == asset_id,
        AssetTransfer.status == TransferStatus.PENDING.value,
    )


def select_pending_asset_ids(asset_ids: list[int]):
    return select(AssetTransfer.asset_id).where(
        AssetTransfer.asset_id.in_(asset_ids),
        AssetTransfer.status == TransferStatus.PENDING.value,
    )


def count_pending(to_department_id: int | None = None, from_department_id: int | None = None):
    stmt = select(func.count(AssetTransfer.id)).where(
        AssetTransfer.status == TransferStatus.PENDING.value
    )
    if to_department_id is not None:
        stmt = stmt.where(AssetTransfer.to_department_id == to_department_id)
    if from_department_id is not None:
        stmt = stmt.where(AssetTransfer.from_department_id == from_department_id)
    return stmt


def resolve_transfer(
    transfer_id: int,
    target: TransferStatus,
    resolved_by: int,
    resolved_at: datetime,
):
    """Compare-and-swap: only a row still pending is moved to `target`."""
    return (
        update(AssetTransfer)
        .where(
            AssetTransfer.id == transfer_id,
            AssetTransfer.status == TransferStatus.PENDING.value,
        )
        .values(status=target.value, approved_by=resolved_by, approved_at=resolved_at)
        .execution_options(synchronize_session=False)
    )


def move_asset(asset_id: int, department_id: int):
    return (
        update(Asset)
        .where(Asset.id == asset_id)
        .values(department_id=department_id)
        .execution_options(synchronize_session=False)
    )
