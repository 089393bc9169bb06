# api/departments/models.py
from pydantic import BaseModel, ConfigDict, Field


class DepartmentCreate(BaseModel):
    name_native: str = Field(..., min_length=1, max_length=255)
    name_alt: str | None = Field(None, max_length=255)
    description: str | None = None


class DepartmentUpdate(DepartmentCreate):
    pass


class DepartmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name_native: str
    name_alt: str | None = None
    description: str | None = None
