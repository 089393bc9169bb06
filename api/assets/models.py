# api/assets/models.py
"""
Pydantic models for the asset registry.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class AssetBase(BaseModel):
    inventory_number: str | None = Field(None, max_length=100)
    serial_number: str | None = Field(None, max_length=100)
    description: str | None = None
    room: str | None = Field(None, max_length=100)
    image_ref: str | None = Field(None, max_length=500, description="Reference to an externally stored image")
    acquired_at: datetime | None = None


class AssetCreate(AssetBase):
    """
    `owner_id` is accepted for compatibility but ignored: the creator is
    always recorded as the owner.
    """
    code: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    department_id: int | None = None
    location_id: int | None = None
    owner_id: int | None = None
    status: str | None = Field(None, max_length=100)


class AssetUpdate(AssetBase):
    """Direct registry update; every field is optional and only sent fields change."""
    code: str | None = Field(None, min_length=1, max_length=100)
    name: str | None = Field(None, min_length=1, max_length=255)
    department_id: int | None = None
    location_id: int | None = None
    owner_id: int | None = None
    status: str | None = Field(None, max_length=100)


class AssetEdit(AssetBase):
    """
    Edit request from a department member.

    Department and location may be given by name; a department change becomes
    a transfer request and a status change becomes an audit, never both at once.
    """
    code: str | None = Field(None, min_length=1, max_length=100)
    name: str | None = Field(None, min_length=1, max_length=255)
    department_id: int | None = None
    department_name: str | None = None
    location_id: int | None = None
    location_name: str | None = None
    status: str | None = Field(None, max_length=100)
    note: str | None = Field(None, max_length=2000, description="Attached to the transfer or audit created")


class AssetStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=100)


class BarcodeAudit(BaseModel):
    """Status observed for a scanned asset; filed as an unconfirmed audit."""
    status: str = Field(..., min_length=1, max_length=100)
    note: str | None = Field(None, max_length=2000)


class AssetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    inventory_number: str | None = None
    serial_number: str | None = None
    name: str
    description: str | None = None
    department_id: int | None = None
    department_name: str | None = None
    location_id: int | None = None
    location_name: str | None = None
    room: str | None = None
    owner_id: int | None = None
    owner_name: str | None = None
    status: str | None = None
    status_label: str | None = None
    status_color: str | None = None
    display_status: str | None = None
    display_color: str | None = None
    has_pending_transfer: bool = False
    has_pending_audit: bool = False
    pending_status: str | None = None
    image_ref: str | None = None
    acquired_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None


class EditOutcome(BaseModel):
    """What an edit request did besides plain field changes."""
    asset: AssetRead
    transfer_id: int | None = None
    audit_id: int | None = None


class LastUpdated(BaseModel):
    last_updated: datetime | None = None
