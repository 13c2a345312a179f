"""Admin user model."""

import uuid
from enum import StrEnum

from sqlmodel import Field, SQLModel

from docrepo.models.base import TimestampMixin, new_uuid


class UserRole(StrEnum):
    ADMIN = "admin"
    EDITOR = "editor"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)
    display_name: str = Field(default="", max_length=255)
    role: UserRole = Field(default=UserRole.EDITOR)
    is_active: bool = Field(default=True)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    display_name: str
    role: UserRole
    is_active: bool
