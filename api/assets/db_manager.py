# api/assets/db_manager.py
"""
Business logic for the asset registry.

Reads overlay outstanding transfers and audits on the stored status (see
core.resolver). Department members never write `status` or `department_id`
directly: the edit operation turns those changes into an audit or a transfer
request. Only a SuperAdmin may overwrite them through the registry update.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.audits import queries as audit_queries
from api.audits.db_manager import stage_audit, submit_audit
from api.departments import queries as department_queries
from api.locations import queries as location_queries
from api.settings.db_manager import get_edit_window, has_edited_in_window, record_edit
from api.transfers import queries as transfer_queries
from api.transfers.db_manager import stage_transfer
from core.catalog import StatusCatalog
from core.clock import as_utc
from core.errors import ConflictError, NotFoundError, ValidationError
from core.policy import Action, Principal, Resource, require, scoped_department
from core.resolver import count_by_asset, resolve_display_status
from db import atomic
from db_models.asset import Asset
from . import queries

logger = logging.getLogger(__name__)

# Fields a department member may change directly through the edit operation.
PLAIN_FIELDS = (
    "code",
    "inventory_number",
    "serial_number",
    "name",
    "description",
    "location_id",
    "room",
    "image_ref",
    "acquired_at",
)

REGISTRY_FIELDS = PLAIN_FIELDS + ("department_id", "owner_id", "status")

REQUIRED_FIELDS = ("code", "name")


async def _build_reads(db: AsyncSession, catalog: StatusCatalog, rows) -> list[dict]:
    if not rows:
        return []

    asset_ids = [row.Asset.id for row in rows]

    result = await db.execute(transfer_queries.select_pending_asset_ids(asset_ids))
    pending_transfers = count_by_asset(result.scalars().all())

    result = await db.execute(audit_queries.select_unconfirmed_for_assets(asset_ids))
    outstanding = result.all()
    unconfirmed_audits = count_by_asset(a.asset_id for a in outstanding)
    pending_status = {a.asset_id: a.status for a in outstanding}

    snapshot = await catalog.snapshot(db)

    reads = []
    for row in rows:
        asset: Asset = row.Asset
        entry = snapshot.get(asset.status) if asset.status is not None else None
        display = resolve_display_status(
            asset.status,
            pending_transfers.get(asset.id, 0),
            unconfirmed_audits.get(asset.id, 0),
            snapshot,
        )
        reads.append({
            "id": asset.id,
            "code": asset.code,
            "inventory_number": asset.inventory_number,
            "serial_number": asset.serial_number,
            "name": asset.name,
            "description": asset.description,
            "department_id": asset.department_id,
            "department_name": row.department_name,
            "location_id": asset.location_id,
            "location_name": row.location_name,
            "room": asset.room,
            "owner_id": asset.owner_id,
            "owner_name": row.owner_name,
            "status": asset.status,
            "status_label": entry.label if entry else asset.status,
            "status_color": entry.color if entry else None,
            "display_status": display.label,
            "display_color": display.color,
            "has_pending_transfer": asset.id in pending_transfers,
            "has_pending_audit": asset.id in unconfirmed_audits,
            "pending_status": pending_status.get(asset.id),
            "image_ref": asset.image_ref,
            "acquired_at": asset.acquired_at,
            "created_at": asset.created_at,
            "updated_at": asset.updated_at,
        })
    return reads


async def get_asset(db: AsyncSession, catalog: StatusCatalog, asset_id: int) -> dict:
    """Single asset with names and display status. Readable by every principal."""
    result = await db.execute(queries.select_asset_read_by_id(asset_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Asset {asset_id} not found")
    return (await _build_reads(db, catalog, [row]))[0]


async def list_assets(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    department_id: int | None = None,
) -> list[dict]:
    """Scoped list: SuperAdmin sees all (optionally filtered), others their department only."""
    visible, scope = scoped_department(principal, department_id)
    if not visible:
        return []
    result = await db.execute(queries.select_assets(department_id=scope))
    return await _build_reads(db, catalog, result.all())


async def list_by_department(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    department_id: int,
) -> list[dict]:
    return await list_assets(db, catalog, principal, department_id=department_id)


async def search_assets(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    term: str | None,
    department_id: int | None = None,
) -> list[dict]:
    """An empty term returns the scoped list."""
    term = (term or "").strip()
    if not term:
        return await list_assets(db, catalog, principal, department_id)

    visible, scope = scoped_department(principal, department_id)
    if not visible:
        return []
    result = await db.execute(queries.search_assets(term, department_id=scope))
    return await _build_reads(db, catalog, result.all())


async def find_by_barcode(db: AsyncSession, catalog: StatusCatalog, barcode: str) -> dict:
    """Match a scanned value against inventory number or code."""
    barcode = (barcode or "").strip()
    if not barcode:
        raise ValidationError("Barcode is required")
    result = await db.execute(queries.select_asset_by_barcode(barcode))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"No asset found for barcode {barcode}")
    return (await _build_reads(db, catalog, [row]))[0]


async def submit_audit_by_barcode(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    barcode: str,
    status: str,
    note: str | None = None,
) -> dict:
    """
    Scan-to-count: file an unconfirmed audit for the asset a barcode names.

    Authorized and validated like a direct audit submission.
    """
    barcode = (barcode or "").strip()
    if not barcode:
        raise ValidationError("Barcode is required")
    result = await db.execute(queries.select_asset_by_barcode(barcode))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"No asset found for barcode {barcode}")
    return await submit_audit(
        db, catalog, principal, asset_id=row.Asset.id, status=status, note=note
    )


async def get_last_updated(db: AsyncSession, principal: Principal) -> datetime | None:
    """Newest updated_at among the assets visible to the principal."""
    visible, scope = scoped_department(principal)
    if not visible:
        return None
    result = await db.execute(queries.select_last_updated(department_id=scope))
    return as_utc(result.scalar())


async def _check_references(
    db: AsyncSession,
    department_id: int | None = None,
    location_id: int | None = None,
) -> None:
    if department_id is not None:
        found = await db.execute(department_queries.select_department_by_id(department_id))
        if found.scalar_one_or_none() is None:
            raise ValidationError(f"Department {department_id} not found")
    if location_id is not None:
        found = await db.execute(location_queries.select_location_by_id(location_id))
        if found.scalar_one_or_none() is None:
            raise ValidationError(f"Location {location_id} not found")


async def _check_code(db: AsyncSession, code: str, exclude_id: int | None = None) -> None:
    taken = await db.execute(queries.select_asset_by_code(code, exclude_id=exclude_id))
    if taken.first() is not None:
        raise ConflictError(f"Asset code '{code}' already exists")


async def _flush(db: AsyncSession, code: str | None) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(f"Asset code '{code}' already exists") from exc


async def _lock_asset(db: AsyncSession, asset_id: int) -> Asset:
    asset = (await db.execute(queries.select_asset_for_update(asset_id))).scalar_one_or_none()
    if asset is None:
        raise NotFoundError(f"Asset {asset_id} not found")
    return asset


async def create_asset(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    attrs: dict,
) -> dict:
    """
    Register an asset owned by the caller.

    Non-SuperAdmins create inside their own department; the department
    defaults to theirs when omitted.

    Raises:
        ValidationError: missing name/code, unknown status, department or location
        AuthorizationError: outside the caller's department
        ConflictError: duplicate code
    """
    code = (attrs.get("code") or "").strip()
    name = (attrs.get("name") or "").strip()
    if not code or not name:
        raise ValidationError("Name and code are required")

    department_id = attrs.get("department_id")
    if department_id is None and not principal.is_super_admin:
        department_id = principal.department_id
    require(principal, Action.ASSET_CREATE, Resource(department_id))

    async with atomic(db):
        status = attrs.get("status")
        if status is not None:
            await catalog.validate(db, status)
        await _check_references(db, department_id, attrs.get("location_id"))
        await _check_code(db, code)

        asset = Asset(
            code=code,
            name=name,
            inventory_number=attrs.get("inventory_number"),
            serial_number=attrs.get("serial_number"),
            description=attrs.get("description"),
            department_id=department_id,
            location_id=attrs.get("location_id"),
            room=attrs.get("room"),
            owner_id=principal.id,
            status=status,
            image_ref=attrs.get("image_ref"),
            acquired_at=attrs.get("acquired_at"),
        )
        db.add(asset)
        await _flush(db, code)

    logger.info("Asset %s ('%s') created by user %s", asset.id, code, principal.id)
    return await get_asset(db, catalog, asset.id)


async def update_asset(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    asset_id: int,
    attrs: dict,
) -> dict:
    """
    Partial registry update that writes every given field directly, including
    the authoritative status and department. Bypasses both workflows, so it
    is SuperAdmin-only. Department and status still never change together, and
    the department stays put while a transfer is pending.
    """
    require(principal, Action.ASSET_SET_STATUS)

    unknown = set(attrs) - set(REGISTRY_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown asset field(s): {', '.join(sorted(unknown))}")
    if any(field in attrs and not attrs[field] for field in REQUIRED_FIELDS):
        raise ValidationError("Name and code cannot be empty")

    async with atomic(db):
        asset = await _lock_asset(db, asset_id)

        department_changes = "department_id" in attrs and attrs["department_id"] != asset.department_id
        status_changes = "status" in attrs and attrs["status"] != asset.status
        if department_changes and status_changes:
            raise ValidationError(
                "Cannot change department and status at the same time. "
                "Update one, then the other."
            )
        if department_changes:
            pending = await db.execute(transfer_queries.select_pending_for_asset(asset.id))
            if pending.first() is not None:
                raise ConflictError(
                    f"Asset {asset.id} has a pending transfer; resolve it before moving the asset"
                )

        if "status" in attrs:
            await catalog.validate(db, attrs["status"])
        if attrs.get("code") is not None:
            await _check_code(db, attrs["code"], exclude_id=asset_id)
        await _check_references(db, attrs.get("department_id"), attrs.get("location_id"))

        for field, value in attrs.items():
            setattr(asset, field, value)
        await _flush(db, attrs.get("code"))

    logger.info("Asset %s updated directly by user %s: %s", asset_id, principal.id, sorted(attrs))
    return await get_asset(db, catalog, asset_id)


async def set_status(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    asset_id: int,
    status: str,
) -> dict:
    """Overwrite the authoritative status. SuperAdmin only."""
    return await update_asset(db, catalog, principal, asset_id, {"status": status})


async def edit_asset(
    db: AsyncSession,
    catalog: StatusCatalog,
    principal: Principal,
    asset_id: int,
    changes: dict,
) -> tuple[dict, int | None, int | None]:
    """
    The department edit operation. Returns (asset, transfer_id, audit_id).

    In one transaction: a status change becomes an unconfirmed audit, a
    department change becomes a pending transfer, and the remaining plain
    fields are written directly. The stored status and department are never
    written here.

    Raises:
        ValidationError: department and status both change, unknown status,
            unknown location, self-transfer
        AuthorizationError: wrong department, read-only principal, or the
            caller already edited this asset during the active edit window
        ConflictError: an outstanding transfer/audit exists, duplicate code
    """
    note = changes.pop("note", None)

    async with atomic(db):
        asset = await _lock_asset(db, asset_id)

        window = await get_edit_window(db)
        edited = await has_edited_in_window(db, principal, asset.id, window)
        require(principal, Action.ASSET_EDIT, Resource(asset.department_id, edited))

        new_department = changes.get("department_id")
        new_status = changes.get("status")
        department_changes = new_department is not None and new_department != asset.department_id
        status_changes = new_status is not None and new_status != asset.status

        if department_changes and status_changes:
            raise ValidationError(
                "Cannot change department and status at the same time. "
                "Submit the transfer and the audit separately."
            )
        if new_status is not None:
            await catalog.validate(db, new_status)

        plain = {
            field: changes[field]
            for field in PLAIN_FIELDS
            if field in changes
            and not (field in REQUIRED_FIELDS and not changes[field])
            and changes[field] != getattr(asset, field)
        }
        if plain.get("code") is not None:
            await _check_code(db, plain["code"], exclude_id=asset.id)
        await _check_references(db, location_id=plain.get("location_id"))
        for field, value in plain.items():
            setattr(asset, field, value)

        transfer_id = audit_id = None
        if status_changes:
            audit = await stage_audit(db, catalog, principal, asset, new_status, note)
            audit_id = audit.id
        if department_changes:
            transfer = await stage_transfer(db, principal, asset, new_department, note)
            transfer_id = transfer.id

        await _flush(db, plain.get("code"))
        if plain or audit_id or transfer_id:
            record_edit(db, principal, asset.id, window)

    logger.info(
        "Asset %s edited by user %s: fields=%s transfer=%s audit=%s",
        asset_id, principal.id, sorted(plain), transfer_id, audit_id,
    )
    return await get_asset(db, catalog, asset_id), transfer_id, audit_id


async def delete_asset(db: AsyncSession, principal: Principal, asset_id: int) -> None:
    """Hard delete. Transfer and audit history rows are kept."""
    require(principal, Action.ASSET_DELETE)

    async with atomic(db):
        asset = await _lock_asset(db, asset_id)
        await db.delete(asset)

    logger.info("Asset %s deleted by user %s", asset_id, principal.id)
