# api/transfers/models.py
"""
Pydantic models for transfer requests.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class TransferCreate(BaseModel):
    asset_id: int
    to_department_id: int
    note: str | None = Field(None, max_length=2000)


class TransferRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int
    asset_name: str | None = None
    asset_code: str | None = None
    from_department_id: int | None = None
    from_department_name: str | None = None
    to_department_id: int
    to_department_name: str | None = None
    requested_by: int
    requested_by_name: str | None = None
    status: str
    note: str | None = None
    requested_at: datetime
    approved_by: int | None = None
    approved_by_name: str | None = None
    approved_at: datetime | None = None
