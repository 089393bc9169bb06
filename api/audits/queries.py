# api/audits/queries.py
"""
SQLAlchemy query builders for asset audits.
"""
from datetime import datetime

from sqlalchemy import select, update, func

from db_models.asset import Asset
from db_models.asset_audit import AssetAudit
from db_models.department import Department
from db_models.status_value import StatusValue
from db_models.user import User
from core.workflow import AuditState


def select_audit_reads():
    return (
        select(
            AssetAudit,
            Asset.name.label("asset_name"),
            Asset.code.label("asset_code"),
            User.full_name.label("user_name"),
            Department.name_native.label("department_name"),
            StatusValue.label.label("status_label"),
        )
        .outerjoin(Asset, Asset.id == AssetAudit.asset_id)
        .outerjoin(User, User.id == AssetAudit.user_id)
        .outerjoin(Department, Department.id == AssetAudit.department_id)
        .outerjoin(StatusValue, StatusValue.value == AssetAudit.status)
    )


def select_audit_read_by_id(audit_id: int):
    return select_audit_reads().where(AssetAudit.id == audit_id)


def _filtered(stmt, department_id=None, asset_id=None, confirmed=None):
    if department_id is not None:
        stmt = stmt.where(AssetAudit.department_id == department_id)
    if asset_id is not None:
        stmt = stmt.where(AssetAudit.asset_id == asset_id)
    if confirmed is not None:
        stmt = stmt.where(AssetAudit.confirmed == confirmed)
    return stmt


def count_audits(department_id: int | None = None, asset_id: int | None = None, confirmed: int | None = None):
    return _filtered(select(func.count(AssetAudit.id)), department_id, asset_id, confirmed)


def select_audits(
    department_id: int | None = None,
    asset_id: int | None = None,
    confirmed: int | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """Newest first; id breaks ties so pages never overlap."""
    stmt = _filtered(select_audit_reads(), department_id, asset_id, confirmed)
    return (
        stmt.order_by(AssetAudit.checked_at.desc(), AssetAudit.id.desc())
        .offset(skip)
        .limit(limit)
    )


def select_asset_history(asset_id: int):
    return (
        select_audit_reads()
        .where(AssetAudit.asset_id == asset_id)
        .order_by(AssetAudit.checked_at.desc(), AssetAudit.id.desc())
    )


def select_unconfirmed_for_asset(asset_id: int):
    return select(AssetAudit.id).where(
        AssetAudit.asset_id == asset_id,
        AssetAudit.confirmed == AuditState.UNCONFIRMED.value,
    )


def select_unconfirmed_for_assets(asset_ids: list[int]):
    return (
        select(AssetAudit.asset_id, AssetAudit.status)
        .where(
            AssetAudit.asset_id.in_(asset_ids),
            AssetAudit.confirmed == AuditState.UNCONFIRMED.value,
        )
        .order_by(AssetAudit.checked_at.asc(), AssetAudit.id.asc())
    )


def select_audits_for_update(audit_ids: list[int]):
    return select(AssetAudit).where(AssetAudit.id.in_(audit_ids)).with_for_update()


def confirm_audits(audit_ids: list[int], confirmed_by: int, confirmed_at: datetime):
    """Flip only rows that are still unconfirmed; already-confirmed rows are left as they are."""
    return (
        update(AssetAudit)
        .where(
            AssetAudit.id.in_(audit_ids),
            AssetAudit.confirmed == AuditState.UNCONFIRMED.value,
        )
        .values(
            confirmed=AuditState.CONFIRMED.value,
            confirmed_by=confirmed_by,
            confirmed_at=confirmed_at,
        )
        .execution_options(synchronize_session=False)
    )


def apply_status(asset_id: int, status: str):
    return (
        update(Asset)
        .where(Asset.id == asset_id)
        .values(status=status)
        .execution_options(synchronize_session=False)
    )
