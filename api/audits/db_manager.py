# api/audits/db_manager.py
"""
Audit workflow: physical-count assertions about an asset's status.

An audit is submitted unconfirmed and later confirmed in batches by an Admin
of its department. Confirming is one-way and idempotent. By default it does
not touch the asset; AUDIT_CONFIRM_APPLIES_STATUS opts into writing the
asserted status back.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.assets import queries as asset_queries
from api.settings.db_manager import get_edit_window, has_edited_in_window, record_edit
from config import settings
from core.catalog import StatusCatalog
from core.clock import utcnow
from core.errors import ConflictError, NotFoundError, ValidationError
from core.policy import Action, Principal, Resource, require, scoped_department
from core.workflow import AuditEvent, AuditState, audit_transition
from db import atomic
from db_models.asset import Asset
from db_models.asset_audit import AssetAudit
from . import queries

logger = logging.getLogger(__name__)


def audit_to_dict(row) -> dict:
    audit: AssetAudit = row.AssetAudit
    return {
        "id": audit.id,
        "asset_id": audit.asset_id,
        "asset_name": row.asset_name,
        "asset_code": row.asset_code,
        "user_id": audit.user_id,
        "user_name": row.user_name,
        "department_id": audit.department_id,
        "department_name": row.department_name,
        "status": audit.status,
        "status_label": row.status_label,
        "note": audit.note,
        "checked_at": audit.checked_at,
        "confirmed": audit.confirmed,
        "confirmed_by": audit.confirmed_by,
        "confirmed_at": audit.confirmed_at,
    }


async def get_audit(db: AsyncSession, audit_id: int) -> dict:
    result = await db.execute(queries.select_audit_read_by_id(audit_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Audit {audit_id} not found")
    return audit_to_dict(row)


async def stage_audit(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    asset: Asset,
    status: str,
    note: str | None = None,
) -> AssetAudit:
    """
    Add an unconfirmed audit for an asset the caller already locked and was
    authorized to edit. Flushes, never commits.

    Raises:
        ValidationError: status is not in the live catalog
        ConflictError: the asset already has an unconfirmed audit
    """
    await catalog.validate(db, status)

    outstanding = await db.execute(queries.select_unconfirmed_for_asset(asset.id))
    if outstanding.first() is not None:
        raise ConflictError(f"Asset {asset.id} already has an unconfirmed audit")

    audit = AssetAudit(
        asset_id=asset.id,
        user_id=principal.id,
        department_id=asset.department_id,
        status=status,
        note=note,
        checked_at=utcnow(),
        confirmed=AuditState.UNCONFIRMED.value,
    )
    db.add(audit)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(f"Asset {asset.id} already has an unconfirmed audit") from exc
    return audit


async def submit_audit(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    *,
    asset_id: int,
    status: str,
    note: str | None = None,
) -> dict:
    async with atomic(db):
        asset = (await db.execute(asset_queries.select_asset_for_update(asset_id))).scalar_one_or_none()
        if asset is None:
            raise NotFoundError(f"Asset {asset_id} not found")

        window = await get_edit_window(db)
        edited = await has_edited_in_window(db, principal, asset.id, window)
        require(principal, Action.AUDIT_SUBMIT, Resource(asset.department_id, edited))

        audit = await stage_audit(db, catalog, principal, asset, status, note)
        record_edit(db, principal, asset.id, window)

    logger.info(
        "Audit %s submitted for asset %s with status '%s' by user %s",
        audit.id, asset_id, status, principal.id,
    )
    return await get_audit(db, audit.id)


async def confirm_audits(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    audit_ids: list[int],
) -> int:
    """
    Confirm a batch of audits, all or nothing. Returns how many rows changed.

    Already-confirmed ids are accepted and left unchanged.

    Raises:
        ValidationError: empty batch
        NotFoundError: any id is unknown
        AuthorizationError: any audit belongs to a department the caller cannot confirm for
    """
    ids = sorted(set(audit_ids))
    if not ids:
        raise ValidationError("No audit ids supplied")

    async with atomic(db):
        result = await db.execute(queries.select_audits_for_update(ids))
        audits = list(result.scalars().all())

        found = {a.id for a in audits}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(f"Audit(s) not found: {', '.join(str(i) for i in missing)}")

        to_confirm: list[AssetAudit] = []
        for audit in audits:
            require(principal, Action.AUDIT_CONFIRM, Resource(audit.department_id))
            current = AuditState(audit.confirmed)
            if audit_transition(current, AuditEvent.CONFIRM) != current:
                to_confirm.append(audit)

        confirmed = 0
        if to_confirm:
            result = await db.execute(
                queries.confirm_audits([a.id for a in to_confirm], principal.id, utcnow())
            )
            confirmed = result.rowcount

        if settings.AUDIT_CONFIRM_APPLIES_STATUS:
            for audit in to_confirm:
                await catalog.validate(db, audit.status)
                applied = await db.execute(queries.apply_status(audit.asset_id, audit.status))
                if applied.rowcount == 0:
                    logger.warning("Audit %s refers to deleted asset %s", audit.id, audit.asset_id)

    logger.info(
        "User %s confirmed %d of %d audit(s): %s",
        principal.id, confirmed, len(ids), ids,
    )
    return confirmed


async def list_audits(
    db: AsyncSession,
    principal: Principal,
    *,
    department_id: int | None = None,
    asset_id: int | None = None,
    confirmed: int | None = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[dict], int]:
    """Department-scoped, paginated audit list ordered by checked_at desc."""
    if confirmed is not None and confirmed not in (0, 1):
        raise ValidationError("confirmed must be 0 or 1")
    if skip < 0:
        raise ValidationError("skip must not be negative")
    if limit < 1:
        raise ValidationError("limit must be positive")
    limit = min(limit, settings.AUDIT_PAGE_LIMIT_MAX)

    visible, scope = scoped_department(principal, department_id)
    if not visible:
        return [], 0

    total = (await db.execute(
        queries.count_audits(department_id=scope, asset_id=asset_id, confirmed=confirmed)
    )).scalar() or 0
    result = await db.execute(
        queries.select_audits(
            department_id=scope,
            asset_id=asset_id,
            confirmed=confirmed,
            skip=skip,
            limit=limit,
        )
    )
    return [audit_to_dict(row) for row in result.all()], total


async def get_asset_history(db: AsyncSession, asset_id: int) -> list[dict]:
    """Every audit recorded for an asset, newest first. Not department-scoped."""
    result = await db.execute(queries.select_asset_history(asset_id))
    return [audit_to_dict(row) for row in result.all()]
