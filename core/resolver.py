# core/resolver.py
"""
Display-status resolution.

The displayed status of an asset is derived on every read by overlaying its
outstanding workflow rows on the authoritative `Asset.status`. Nothing here
touches the database and nothing it produces is persisted.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

TRANSFERRING_LABEL = "Transferring"
PENDING_LABEL = "Pending"


class DisplaySource(str, Enum):
    TRANSFER = "transfer"
    AUDIT = "audit"
    CATALOG = "catalog"


@dataclass(frozen=True)
class CatalogEntry:
    value: str
    label: str
    color: str


@dataclass(frozen=True)
class DisplayStatus:
    label: str | None
    color: str | None
    source: DisplaySource


def resolve_display_status(
    asset_status: str | None,
    pending_transfer_count: int,
    unconfirmed_audit_count: int,
    catalog: Mapping[str, CatalogEntry],
) -> DisplayStatus:
    """
    Pending transfer beats unconfirmed audit, which beats the catalog label.

    A status value missing from the catalog (deleted after assignment) is shown raw.
    """
    if pending_transfer_count > 0:
        return DisplayStatus(TRANSFERRING_LABEL, None, DisplaySource.TRANSFER)
    if unconfirmed_audit_count > 0:
        return DisplayStatus(PENDING_LABEL, None, DisplaySource.AUDIT)

    entry = catalog.get(asset_status) if asset_status is not None else None
    if entry is None:
        return DisplayStatus(asset_status, None, DisplaySource.CATALOG)
    return DisplayStatus(entry.label, entry.color, DisplaySource.CATALOG)


def count_by_asset(asset_ids: Iterable[int | None]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for asset_id in asset_ids:
        if asset_id is not None:
            counts[asset_id] = counts.get(asset_id, 0) + 1
    return counts
