"""User model."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, String, Text

from app.database import Base


class UserRole(str, enum.Enum):
    """Roles a user account can hold."""

    ADMIN = "ADMIN"
    USER = "USER"


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Application user account.

    ``password_hash`` and ``refresh_token`` are server-side only; anything leaving
    the service goes through ``app.services.user_store.public_view``.
    """

    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(256), nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    active = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(1024), nullable=True)
    refresh_token = Column(Text, nullable=True)  # single active session
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
