# api/assets/queries.py
"""
SQLAlchemy query builders for the asset registry.
"""
from sqlalchemy import select, func, or_, case

from db_models.asset import Asset
from db_models.department import Department
from db_models.location import Location
from db_models.user import User

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def select_asset_reads():
    """Assets with the department, location and owner names used on every read."""
    return (
        select(
            Asset,
            Department.name_native.label("department_name"),
            Location.name.label("location_name"),
            User.full_name.label("owner_name"),
        )
        .outerjoin(Department, Department.id == Asset.department_id)
        .outerjoin(Location, Location.id == Asset.location_id)
        .outerjoin(User, User.id == Asset.owner_id)
    )


def select_asset_read_by_id(asset_id: int):
    # Refresh rows already held by the session; workflow writes go through Core updates.
    return (
        select_asset_reads()
        .where(Asset.id == asset_id)
        .execution_options(populate_existing=True)
    )


def select_asset_for_update(asset_id: int):
    return select(Asset).where(Asset.id == asset_id).with_for_update()


def select_asset_by_code(code: str, exclude_id: int | None = None):
    stmt = select(Asset.id).where(Asset.code == code)
    if exclude_id is not None:
        stmt = stmt.where(Asset.id != exclude_id)
    return stmt


def select_assets(department_id: int | None = None):
    stmt = select_asset_reads()
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt.order_by(Asset.id.desc())


def search_assets(term: str, department_id: int | None = None):
    """
    Case-insensitive substring search.

    Prefix matches on code, then inventory number, then name sort ahead of
    everything else; ties break on id.
    """
    escaped = _escape_like(term.lower())
    contains = f"%{escaped}%"
    prefix = f"{escaped}%"

    def like(column, pattern):
        return func.lower(column).like(pattern, escape=LIKE_ESCAPE)

    stmt = select_asset_reads().where(
        or_(
            like(Asset.code, contains),
            like(Asset.inventory_number, contains),
            like(Asset.name, contains),
            like(Asset.description, contains),
            like(Department.name_native, contains),
            like(Location.name, contains),
            like(User.full_name, contains),
            like(Asset.room, contains),
        )
    )
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)

    rank = case(
        (like(Asset.code, prefix), 1),
        (like(Asset.inventory_number, prefix), 2),
        (like(Asset.name, prefix), 3),
        else_=4,
    )
    return stmt.order_by(rank, Asset.id.asc())


def select_asset_by_barcode(barcode: str):
    return (
        select_asset_reads()
        .where(or_(Asset.inventory_number == barcode, Asset.code == barcode))
        .order_by(Asset.id.asc())
        .limit(1)
    )


def select_last_updated(department_id: int | None = None):
    stmt = select(func.max(Asset.updated_at))
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt


def count_assets(department_id: int | None = None):
    stmt = select(func.count(Asset.id))
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt


def count_assets_by_status(department_id: int | None = None):
    stmt = select(Asset.status, func.count(Asset.id).label("total")).group_by(Asset.status)
    if department_id is not None:
        stmt = stmt.where(Asset.department_id == department_id)
    return stmt
