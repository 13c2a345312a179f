"""Document model: one catalogued academic work."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import field_validator
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from docrepo.models.base import SoftDeleteMixin, TimestampMixin, new_uuid


class DocumentType(StrEnum):
    """The document category shown in the catalog sidebar."""

    THESIS = "Thesis"
    DISSERTATION = "Dissertation"
    CONFLUENCE = "Confluence"
    SYNERGY = "Synergy"

    @classmethod
    def parse(cls, value: str) -> "DocumentType":
        """Case-insensitive lookup by value, name or legacy alias. Raises ValueError."""
        needle = value.strip().lower()
        if needle in _LEGACY_TYPE_NAMES:
            return cls[_LEGACY_TYPE_NAMES[needle]]
        for member in cls:
            if needle in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown document type: {value!r}")


# Older admin pages still send these names.
_LEGACY_TYPE_NAMES = {"synthesis": "SYNERGY"}

# Single works are not part of a periodical.
SINGLE_WORK_TYPES = frozenset({DocumentType.THESIS, DocumentType.DISSERTATION})


class SortOrder(StrEnum):
    LATEST = "latest"
    EARLIEST = "earliest"
    TITLE = "title"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """Unknown or missing values fall back to LATEST."""
        if value:
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.LATEST


class Document(TimestampMixin, SoftDeleteMixin, SQLModel, table=True):
    __tablename__ = "documents"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    title: str = Field(max_length=500, nullable=False)
    category: DocumentType = Field(nullable=False, index=True)

    publication_date: date | None = Field(default=None, index=True)
    volume: str | None = Field(default=None, max_length=50)
    issue: str | None = Field(default=None, max_length=50)
    abstract: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))

    file_path: str | None = Field(default=None, max_length=1000)
    cover_image_path: str | None = Field(default=None, max_length=1000)
    page_count: int | None = Field(default=None)


class Author(SQLModel, table=True):
    __tablename__ = "authors"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    full_name: str = Field(max_length=255, nullable=False, unique=True, index=True)


class Topic(SQLModel, table=True):
    __tablename__ = "topics"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False, unique=True, index=True)


class DocumentAuthor(SQLModel, table=True):
    """Ordered author credit; ``position`` preserves byline order."""

    __tablename__ = "document_authors"

    document_id: uuid.UUID = Field(foreign_key="documents.id", primary_key=True)
    author_id: uuid.UUID = Field(foreign_key="authors.id", primary_key=True)
    position: int = Field(default=0, nullable=False)


class DocumentTopic(SQLModel, table=True):
    __tablename__ = "document_topics"

    document_id: uuid.UUID = Field(foreign_key="documents.id", primary_key=True)
    topic_id: uuid.UUID = Field(foreign_key="topics.id", primary_key=True)


# ── Pydantic schemas ─────────────────────────────────────────

def _coerce_category(value):
    return DocumentType.parse(value) if isinstance(value, str) else value


class DocumentCreate(SQLModel):
    title: str = Field(min_length=1, max_length=500)
    category: DocumentType
    authors: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    publication_date: date | None = None
    volume: str | None = Field(default=None, max_length=50)
    issue: str | None = Field(default=None, max_length=50)
    abstract: str = ""
    cover_image_path: str | None = Field(default=None, max_length=1000)

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value):
        return _coerce_category(value)


class DocumentUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    category: DocumentType | None = None
    authors: list[str] | None = None
    topics: list[str] | None = None
    publication_date: date | None = None
    volume: str | None = Field(default=None, max_length=50)
    issue: str | None = Field(default=None, max_length=50)
    abstract: str | None = None
    cover_image_path: str | None = Field(default=None, max_length=1000)

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value):
        return _coerce_category(value)


class DocumentSummary(SQLModel):
    """One row of the catalog listing."""

    id: uuid.UUID
    title: str
    category: DocumentType
    authors: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    publication_date: date | None = None
    year: int | None = None
    volume: str | None = None
    cover_image_path: str | None = None


class DocumentRead(DocumentSummary):
    abstract: str = ""
    issue: str | None = None
    file_path: str | None = None
    page_count: int | None = None
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime


class DocumentPage(SQLModel):
    documents: list[DocumentSummary] = Field(default_factory=list)
    total: int = Field(ge=0)


class CategoryCount(SQLModel):
    name: str
    count: int = Field(ge=0)


class ArchivedDocument(DocumentSummary):
    deleted_at: datetime | None = None


class ArchivePage(SQLModel):
    documents: list[ArchivedDocument] = Field(default_factory=list)
    total: int = Field(ge=0)


MIN_AUTHOR_QUERY = 2


class AuthorRead(SQLModel):
    id: uuid.UUID
    full_name: str
