"""Document catalog: public listing plus admin writes."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError

from docrepo.api.deps import Auth, AuthContext, Session
from docrepo.core.config import get_settings
from docrepo.models.document import (
    ArchivePage,
    DocumentCreate,
    DocumentPage,
    DocumentRead,
    DocumentUpdate,
)
from docrepo.models.user import UserRole
from docrepo.services import documents as service
from docrepo.services.documents import DocumentNotFound, InvalidUpload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

_settings = get_settings()

PageParam = Annotated[int, Query(ge=1)]
SizeParam = Annotated[int, Query(ge=1, le=_settings.max_page_size)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


def _require_admin(auth: AuthContext) -> None:
    """Raise 403 unless the caller is an admin; editors only create and edit."""
    if auth.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )


def _listing_failed(what: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to fetch {what}",
    )


# ── Public ────────────────────────────────────────────────────

@router.get("", response_model=DocumentPage)
async def list_documents(
    session: Session,
    page: PageParam = 1,
    size: SizeParam = _settings.page_size,
    category: str | None = None,
    sort: str | None = None,
    search: str | None = None,
) -> DocumentPage:
    """One page of non-deleted documents plus the total match count."""
    try:
        return await service.list_documents(
            session,
            page=page,
            page_size=size,
            category=category,
            sort=sort,
            search=search,
        )
    except SQLAlchemyError as exc:
        logger.exception(
            "Document listing failed (page=%s size=%s category=%s sort=%s)",
            page, size, category, sort,
        )
        raise _listing_failed("documents") from exc


# ── Admin ─────────────────────────────────────────────────────

@router.get("/archived", response_model=ArchivePage)
async def list_archived_documents(
    auth: Auth,
    session: Session,
    page: PageParam = 1,
    size: SizeParam = _settings.page_size,
    category: str | None = None,
    sort: str | None = None,
    search: str | None = None,
) -> ArchivePage:
    """Soft-deleted documents, for finding what to restore."""
    _require_admin(auth)
    try:
        return await service.list_archived_documents(
            session,
            page=page,
            page_size=size,
            category=category,
            sort=sort,
            search=search,
        )
    except SQLAlchemyError as exc:
        logger.exception("Archive listing failed (page=%s category=%s)", page, category)
        raise _listing_failed("archived documents") from exc


@router.get("/{document_id}", response_model=DocumentRead)
async def get_document(document_id: uuid.UUID, session: Session) -> DocumentRead:
    try:
        return await service.get_document(session, document_id)
    except DocumentNotFound:
        raise _not_found() from None


@router.post("", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
async def create_document(
    body: DocumentCreate,
    auth: Auth,
    session: Session,
) -> DocumentRead:
    return await service.create_document(session, body)


@router.patch("/{document_id}", response_model=DocumentRead)
async def update_document(
    document_id: uuid.UUID,
    body: DocumentUpdate,
    auth: Auth,
    session: Session,
) -> DocumentRead:
    try:
        return await service.update_document(session, document_id, body)
    except DocumentNotFound:
        raise _not_found() from None


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> None:
    """Soft delete: the row stays, listings and counts skip it."""
    _require_admin(auth)
    try:
        await service.soft_delete_document(session, document_id)
    except DocumentNotFound:
        raise _not_found() from None


@router.post("/{document_id}/restore", response_model=DocumentRead)
async def restore_document(
    document_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> DocumentRead:
    _require_admin(auth)
    try:
        return await service.restore_document(session, document_id)
    except DocumentNotFound:
        raise _not_found() from None


@router.post("/{document_id}/file", response_model=DocumentRead)
async def upload_document_file(
    document_id: uuid.UUID,
    file: UploadFile,
    auth: Auth,
    session: Session,
) -> DocumentRead:
    """Attach the PDF for a document, replacing any previous upload."""
    content = await file.read()
    try:
        return await service.attach_file(session, document_id, file.filename or "", content)
    except DocumentNotFound:
        raise _not_found() from None
    except InvalidUpload as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(exc),
        ) from exc
