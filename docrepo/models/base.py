"""Column helpers shared by the catalog tables."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Timezone-aware UTC now; every stored timestamp carries tzinfo."""
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class TimestampMixin(SQLModel):
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )

    def touch(self) -> None:
        self.updated_at = utcnow()


class SoftDeleteMixin(SQLModel):
    """Rows are flagged instead of removed; listings filter on ``is_deleted``."""

    is_deleted: bool = Field(default=False, nullable=False, index=True)
    deleted_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))

    def mark_deleted(self) -> None:
        self.is_deleted = True
        self.deleted_at = utcnow()

    def restore(self) -> None:
        self.is_deleted = False
        self.deleted_at = None
