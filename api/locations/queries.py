# api/locations/queries.py
from sqlalchemy import select, func

from db_models.asset import Asset
from db_models.location import Location


def select_all_locations():
    return select(Location).order_by(Location.name.asc(), Location.id.asc())


def select_location_by_id(location_id: int):
    return select(Location).where(Location.id == location_id)


def select_location_by_name(name: str):
    return select(Location).where(Location.name == name).order_by(Location.id.asc()).limit(1)


def count_assets_at_location(location_id: int):
    return select(func.count(Asset.id)).where(Asset.location_id == location_id)
