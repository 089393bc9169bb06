# api/audits/models.py
"""
Pydantic models for asset audits (physical-count assertions).
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class AuditCreate(BaseModel):
    asset_id: int
    status: str = Field(..., min_length=1, max_length=100, description="Status value from the catalog")
    note: str | None = Field(None, max_length=2000)


class AuditConfirm(BaseModel):
    ids: list[int] = Field(..., description="Audit IDs to confirm")


class AuditConfirmResult(BaseModel):
    requested: int
    confirmed: int


class AuditRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int
    asset_name: str | None = None
    asset_code: str | None = None
    user_id: int
    user_name: str | None = None
    department_id: int | None = None
    department_name: str | None = None
    status: str
    status_label: str | None = None
    note: str | None = None
    checked_at: datetime
    confirmed: int
    confirmed_by: int | None = None
    confirmed_at: datetime | None = None


class AuditPage(BaseModel):
    total: int
    items: list[AuditRead]
