# api/dashboard/queries.py
"""
SQLAlchemy query builders for dashboard statistics.
"""
from sqlalchemy import select, func

from db_models.asset import Asset
from db_models.asset_audit import AssetAudit
from core.workflow import AuditState


def count_unconfirmed_audits(department_id: int | None = None):
    stmt = select(func.count(AssetAudit.id)).where(
        AssetAudit.confirmed == AuditState.UNCONFIRMED.value
    )
    if department_id is not None:
        stmt = stmt.where(AssetAudit.department_id == department_id)
    return stmt


def count_assets_without_status(department_id: int | None = None):
    stmt = select(func.count(Asset.id)).where(Asset.status.is_(None))
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt


def select_acquired_between(start, end, department_id: int | None = None):
    stmt = select(Asset.acquired_at).where(
        Asset.acquired_at >= start,
        Asset.acquired_at < end,
    )
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt
