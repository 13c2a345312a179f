"""Import all models so SQLModel.metadata picks them up."""

from docrepo.models.document import (
    ArchivedDocument,
    ArchivePage,
    Author,
    AuthorRead,
    CategoryCount,
    Document,
    DocumentAuthor,
    DocumentCreate,
    DocumentPage,
    DocumentRead,
    DocumentSummary,
    DocumentTopic,
    DocumentType,
    DocumentUpdate,
    SortOrder,
    Topic,
)
from docrepo.models.user import User, UserRead, UserRole

__all__ = [
    "ArchivePage",
    "ArchivedDocument",
    "Author",
    "AuthorRead",
    "CategoryCount",
    "Document",
    "DocumentAuthor",
    "DocumentCreate",
    "DocumentPage",
    "DocumentRead",
    "DocumentSummary",
    "DocumentTopic",
    "DocumentType",
    "DocumentUpdate",
    "SortOrder",
    "Topic",
    "User",
    "UserRead",
    "UserRole",
]
