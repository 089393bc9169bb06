# api/settings/db_manager.py
"""
Edit window: the global audit period during which non-SuperAdmins may touch
each asset once.

The window is a single system_settings row. It is active when both bounds are
set and the current time falls between them. A principal "already edited" an
asset when an edit log row for the pair lies inside the current bounds, so the
restriction resets as soon as a new window starts.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import as_utc, utcnow
from core.errors import ValidationError
from core.policy import Action, Principal, require
from db import atomic
from db_models.asset_edit_log import AssetEditLog
from db_models.system_setting import EDIT_WINDOW_KEY, SystemSetting
from . import queries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditWindow:
    start_at: datetime | None = None
    end_at: datetime | None = None

    def is_active(self, now: datetime | None = None) -> bool:
        if self.start_at is None or self.end_at is None:
            return False
        now = now or utcnow()
        return self.start_at <= now <= self.end_at


async def get_edit_window(db: AsyncSession) -> EditWindow:
    result = await db.execute(queries.select_setting(EDIT_WINDOW_KEY))
    row = result.scalar_one_or_none()
    if row is None:
        return EditWindow()
    return EditWindow(start_at=as_utc(row.start_at), end_at=as_utc(row.end_at))


async def set_edit_window(
    db: AsyncSession,
    principal: Principal,
    *,
    start_at: datetime | None,
    end_at: datetime | None,
) -> EditWindow:
    """
    Replace the window bounds. SuperAdmin only.

    Raises:
        ValidationError: only one bound given, or start after end
    """
    require(principal, Action.SETTINGS_WRITE)

    start_at, end_at = as_utc(start_at), as_utc(end_at)
    if (start_at is None) != (end_at is None):
        raise ValidationError("start_at and end_at must be set together")
    if start_at is not None and start_at > end_at:
        raise ValidationError("start_at must not be later than end_at")

    async with atomic(db):
        row = (await db.execute(queries.select_setting(EDIT_WINDOW_KEY))).scalar_one_or_none()
        if row is None:
            row = SystemSetting(key_name=EDIT_WINDOW_KEY)
            db.add(row)
        row.start_at = start_at
        row.end_at = end_at

    logger.info(
        "Edit window set to [%s, %s] by user %s",
        start_at.isoformat() if start_at else None,
        end_at.isoformat() if end_at else None,
        principal.id,
    )
    return EditWindow(start_at=start_at, end_at=end_at)


async def has_edited_in_window(
    db: AsyncSession,
    principal: Principal,
    asset_id: int,
    window: EditWindow,
) -> bool:
    """True when the window is active and the principal already used their edit on the asset."""
    if principal.is_super_admin or not window.is_active():
        return False
    stmt = queries.select_edit_in_window(principal.id, asset_id, window.start_at, window.end_at)
    return (await db.execute(stmt)).scalar_one_or_none() is not None


def record_edit(db: AsyncSession, principal: Principal, asset_id: int, window: EditWindow) -> None:
    """Stage an edit log row inside the caller's transaction when the edit counts against the window."""
    if principal.is_super_admin or not window.is_active():
        return
    db.add(AssetEditLog(asset_id=asset_id, user_id=principal.id, edited_at=utcnow()))
