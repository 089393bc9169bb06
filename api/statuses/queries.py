# api/statuses/queries.py
"""
SQLAlchemy query builders for the status catalog.
"""
from sqlalchemy import select, func

from db_models.asset import Asset
from db_models.asset_audit import AssetAudit
from db_models.status_value import StatusValue
from core.workflow import AuditState


def select_all_statuses():
    return select(StatusValue).order_by(StatusValue.id.asc())


def select_status_by_id(status_id: int):
    return select(StatusValue).where(StatusValue.id == status_id)


def select_status_by_value(value: str):
    return select(StatusValue).where(StatusValue.value == value)


def count_assets_with_status(value: str):
    return select(func.count(Asset.id)).where(Asset.status == value)


def count_unconfirmed_audits_with_status(value: str):
    return (
        select(func.count(AssetAudit.id))
        .where(
            AssetAudit.status == value,
            AssetAudit.confirmed == AuditState.UNCONFIRMED.value,
        )
    )
