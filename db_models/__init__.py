# Import every model so they register on Base.metadata.
from db_models.department import Department
from db_models.location import Location
from db_models.user import User, UserRole
from db_models.status_value import StatusValue
from db_models.asset import Asset
from db_models.asset_transfer import AssetTransfer
from db_models.asset_audit import AssetAudit
from db_models.asset_edit_log import AssetEditLog
from db_models.system_setting import SystemSetting, EDIT_WINDOW_KEY

__all__ = [
    "Department",
    "Location",
    "User",
    "UserRole",
    "StatusValue",
    "Asset",
    "AssetTransfer",
    "AssetAudit",
    "AssetEditLog",
    "SystemSetting",
    "EDIT_WINDOW_KEY",
]
