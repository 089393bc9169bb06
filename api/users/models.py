# api/users/models.py
"""
Pydantic models for user management.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict

ROLE_PATTERN = "^(SuperAdmin|Admin|User)$"


class UserCreate(BaseModel):
    """Request to register a user. Credentials live with the external sign-in service."""
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="User", pattern=ROLE_PATTERN)
    department_id: int | None = None


class UserUpdate(BaseModel):
    """Partial update; `department_id` is only cleared when sent explicitly as null."""
    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=1, max_length=255)
    role: str | None = Field(None, pattern=ROLE_PATTERN)
    department_id: int | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    role: str
    department_id: int | None = None
    is_active: bool
    created_at: datetime


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
