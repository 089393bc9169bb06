# api/settings/models.py
from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class EditWindowUpdate(BaseModel):
    """Both bounds null closes the window."""
    start_at: datetime | None = Field(None, description="Window start, naive values are read as UTC")
    end_at: datetime | None = Field(None, description="Window end, naive values are read as UTC")

    @model_validator(mode="after")
    def check_bounds(self) -> "EditWindowUpdate":
        if (self.start_at is None) != (self.end_at is None):
            raise ValueError("start_at and end_at must be set together")
        return self


class EditWindowRead(BaseModel):
    start_at: datetime | None = None
    end_at: datetime | None = None
    active: bool = False
