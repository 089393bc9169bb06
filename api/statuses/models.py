# api/statuses/models.py
from pydantic import BaseModel, ConfigDict, Field


class StatusCreate(BaseModel):
    value: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=255)
    color: str | None = Field(None, max_length=20, description="Defaults to neutral gray")


class StatusUpdate(StatusCreate):
    pass


class StatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    value: str
    label: str
    color: str
