# api/settings/queries.py
from datetime import datetime

from sqlalchemy import select

from db_models.asset_edit_log import AssetEditLog
from db_models.system_setting import SystemSetting


def select_setting(key_name: str):
    return select(SystemSetting).where(SystemSetting.key_name == key_name)


def select_edit_in_window(user_id: int, asset_id: int, start_at: datetime, end_at: datetime):
    return (
        select(AssetEditLog.id)
        .where(
            AssetEditLog.user_id == user_id,
            AssetEditLog.asset_id == asset_id,
            AssetEditLog.edited_at >= start_at,
            AssetEditLog.edited_at <= end_at,
        )
        .limit(1)
    )
