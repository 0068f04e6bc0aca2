"""Pydantic schemas for user endpoints."""

from datetime import datetime

from pydantic import BaseModel

from app.models.user import UserRole


class UserPublic(BaseModel):
    """Client-facing view of a user. Never carries the password hash or refresh token."""

    id: str
    name: str
    email: str
    role: UserRole
    active: bool
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    name: str
    email: str
    password: str
    role: UserRole | None = None
    active: bool = True


class UserUpdate(BaseModel):
    """Full replacement of the editable fields, password included."""

    name: str
    email: str
    password: str
    role: UserRole | None = None
    active: bool | None = None


class UserEdit(BaseModel):
    """Partial edit. The password cannot be changed through this schema."""

    name: str | None = None
    email: str | None = None
    role: UserRole | None = None
    active: bool | None = None
    image_url: str | None = None

    model_config = {"extra": "forbid"}
