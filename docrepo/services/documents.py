"""Document queries and admin writes.

Listing contract: ``list_documents`` returns exactly the rows
``[(page-1)*page_size, page*page_size)`` of the matching, sorted,
non-deleted set together with ``total``, the size of that set ignoring
pagination. Pages past the end come back empty with ``total`` unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from docrepo.core.config import get_settings
from docrepo.models.document import (
    MIN_AUTHOR_QUERY,
    SINGLE_WORK_TYPES,
    ArchivedDocument,
    ArchivePage,
    Author,
    AuthorRead,
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
from docrepo.services.categories import invalidate_category_counts
from docrepo.services.pdf import PDF_EXTENSIONS, read_pdf_page_count

logger = logging.getLogger(__name__)


class DocumentNotFound(LookupError):
    pass


class InvalidUpload(ValueError):
    pass


# ── Listing ───────────────────────────────────────────────────


def _ordering(sort: SortOrder) -> list:
    if sort is SortOrder.TITLE:
        return [Document.title.asc(), Document.id.asc()]
    if sort is SortOrder.EARLIEST:
        date_order = Document.publication_date.asc()
        created_order = Document.created_at.asc()
    else:
        date_order = Document.publication_date.desc()
        created_order = Document.created_at.desc()
    # Undated documents sort last in both directions
    return [
        Document.publication_date.is_(None),
        date_order,
        created_order,
        Document.title.asc(),
        Document.id.asc(),
    ]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _search_clause(search: str):
    pattern = _like_pattern(search)
    author_match = (
        select(DocumentAuthor.document_id)
        .join(Author, Author.id == DocumentAuthor.author_id)
        .where(Author.full_name.ilike(pattern, escape="\\"))
    )
    return or_(
        Document.title.ilike(pattern, escape="\\"),
        Document.abstract.ilike(pattern, escape="\\"),
        Document.id.in_(author_match),
    )


async def _fetch_page(
    session: AsyncSession,
    *,
    deleted: bool,
    page: int,
    page_size: int | None,
    category: str | None,
    sort: str | SortOrder | None,
    search: str | None,
) -> tuple[list[Document], int]:
    if page < 1:
        raise ValueError("page must be >= 1")
    page_size = page_size or get_settings().page_size
    sort_order = SortOrder.parse(sort)

    conditions = [Document.is_deleted == deleted]
    if category:
        try:
            conditions.append(Document.category == DocumentType.parse(category))
        except ValueError:
            logger.info("Listing requested for unknown category %r", category)
            return [], 0
    if search and search.strip():
        conditions.append(_search_clause(search.strip()))

    count_stmt = select(func.count()).select_from(Document).where(*conditions)
    total = (await session.execute(count_stmt)).scalar_one()

    offset = (page - 1) * page_size
    if offset >= total:
        return [], total

    stmt = (
        select(Document)
        .where(*conditions)
        .order_by(*_ordering(sort_order))
        .offset(offset)
        .limit(page_size)
    )
    return list((await session.execute(stmt)).scalars().all()), total


async def list_documents(
    session: AsyncSession,
    page: int = 1,
    page_size: int | None = None,
    category: str | None = None,
    sort: str | SortOrder | None = None,
    search: str | None = None,
) -> DocumentPage:
    """Paginated, filtered, sorted catalog listing."""
    docs, total = await _fetch_page(
        session,
        deleted=False,
        page=page,
        page_size=page_size,
        category=category,
        sort=sort,
        search=search,
    )
    return DocumentPage(documents=await _summaries(session, docs), total=total)


async def list_archived_documents(
    session: AsyncSession,
    page: int = 1,
    page_size: int | None = None,
    category: str | None = None,
    sort: str | SortOrder | None = None,
    search: str | None = None,
) -> ArchivePage:
    """Soft-deleted documents, paged and filtered like the public listing."""
    docs, total = await _fetch_page(
        session,
        deleted=True,
        page=page,
        page_size=page_size,
        category=category,
        sort=sort,
        search=search,
    )
    authors, topics = await _load_credits(session, [d.id for d in docs])
    archived = [
        ArchivedDocument(**_summary_fields(d, authors[d.id], topics[d.id]), deleted_at=d.deleted_at)
        for d in docs
    ]
    return ArchivePage(documents=archived, total=total)


async def search_authors(session: AsyncSession, query: str, limit: int = 20) -> list[AuthorRead]:
    """Authors whose name contains ``query`` (case-insensitive), A to Z."""
    term = query.strip()
    if len(term) < MIN_AUTHOR_QUERY:
        return []
    stmt = (
        select(Author)
        .where(Author.full_name.ilike(_like_pattern(term), escape="\\"))
        .order_by(Author.full_name.asc())
        .limit(limit)
    )
    rows = (await session.execute(stmt)).scalars().all()
    return [AuthorRead(id=a.id, full_name=a.full_name) for a in rows]


# ── Credits (authors / topics) ────────────────────────────────


async def _load_credits(
    session: AsyncSession, doc_ids: list[uuid.UUID]
) -> tuple[dict[uuid.UUID, list[str]], dict[uuid.UUID, list[str]]]:
    authors: dict[uuid.UUID, list[str]] = {doc_id: [] for doc_id in doc_ids}
    topics: dict[uuid.UUID, list[str]] = {doc_id: [] for doc_id in doc_ids}
    if not doc_ids:
        return authors, topics

    author_rows = await session.execute(
        select(DocumentAuthor.document_id, Author.full_name)
        .join(Author, Author.id == DocumentAuthor.author_id)
        .where(DocumentAuthor.document_id.in_(doc_ids))
        .order_by(DocumentAuthor.position.asc())
    )
    for doc_id, name in author_rows.all():
        authors[doc_id].append(name)

    topic_rows = await session.execute(
        select(DocumentTopic.document_id, Topic.name)
        .join(Topic, Topic.id == DocumentTopic.topic_id)
        .where(DocumentTopic.document_id.in_(doc_ids))
        .order_by(Topic.name.asc())
    )
    for doc_id, name in topic_rows.all():
        topics[doc_id].append(name)

    return authors, topics


def _summary_fields(doc: Document, authors: list[str], topics: list[str]) -> dict:
    return {
        "id": doc.id,
        "title": doc.title,
        "category": doc.category,
        "authors": authors,
        "topics": topics,
        "publication_date": doc.publication_date,
        "year": doc.publication_date.year if doc.publication_date else None,
        "volume": doc.volume,
        "cover_image_path": doc.cover_image_path,
    }


async def _summaries(session: AsyncSession, docs: list[Document]) -> list[DocumentSummary]:
    authors, topics = await _load_credits(session, [d.id for d in docs])
    return [
        DocumentSummary(**_summary_fields(d, authors[d.id], topics[d.id]))
        for d in docs
    ]


async def _to_read(session: AsyncSession, doc: Document) -> DocumentRead:
    authors, topics = await _load_credits(session, [doc.id])
    return DocumentRead(
        **_summary_fields(doc, authors[doc.id], topics[doc.id]),
        abstract=doc.abstract,
        issue=doc.issue,
        file_path=doc.file_path,
        page_count=doc.page_count,
        is_deleted=doc.is_deleted,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


def _clean_names(names: list[str]) -> list[str]:
    """Strip blanks and drop duplicates, keeping first-seen order."""
    seen: set[str] = set()
    cleaned = []
    for raw in names:
        name = " ".join(raw.split())
        if name and name.lower() not in seen:
            seen.add(name.lower())
            cleaned.append(name)
    return cleaned


async def _replace_authors(session: AsyncSession, doc_id: uuid.UUID, names: list[str]) -> None:
    names = _clean_names(names)
    await session.execute(delete(DocumentAuthor).where(DocumentAuthor.document_id == doc_id))
    if not names:
        return

    existing = await session.execute(select(Author).where(Author.full_name.in_(names)))
    by_name = {a.full_name: a for a in existing.scalars().all()}
    for name in names:
        if name not in by_name:
            author = Author(full_name=name)
            session.add(author)
            by_name[name] = author
    await session.flush()

    for position, name in enumerate(names):
        session.add(DocumentAuthor(document_id=doc_id, author_id=by_name[name].id, position=position))


async def _replace_topics(session: AsyncSession, doc_id: uuid.UUID, names: list[str]) -> None:
    names = _clean_names(names)
    await session.execute(delete(DocumentTopic).where(DocumentTopic.document_id == doc_id))
    if not names:
        return

    existing = await session.execute(select(Topic).where(Topic.name.in_(names)))
    by_name = {t.name: t for t in existing.scalars().all()}
    for name in names:
        if name not in by_name:
            topic = Topic(name=name)
            session.add(topic)
            by_name[name] = topic
    await session.flush()

    for name in names:
        session.add(DocumentTopic(document_id=doc_id, topic_id=by_name[name].id))


# ── Single document reads / admin writes ──────────────────────


def _normalize_periodical_fields(doc: Document) -> None:
    """Single works carry no volume/issue; Synergy carries no issue."""
    if doc.category in SINGLE_WORK_TYPES:
        doc.volume = None
        doc.issue = None
    elif doc.category == DocumentType.SYNERGY:
        doc.issue = None


async def _get(session: AsyncSession, doc_id: uuid.UUID, include_deleted: bool = False) -> Document:
    doc = await session.get(Document, doc_id)
    if doc is None or (doc.is_deleted and not include_deleted):
        raise DocumentNotFound(str(doc_id))
    return doc


async def get_document(
    session: AsyncSession, doc_id: uuid.UUID, include_deleted: bool = False
) -> DocumentRead:
    return await _to_read(session, await _get(session, doc_id, include_deleted))


async def create_document(session: AsyncSession, body: DocumentCreate) -> DocumentRead:
    doc = Document(
        title=body.title.strip(),
        category=body.category,
        publication_date=body.publication_date,
        volume=body.volume,
        issue=body.issue,
        abstract=body.abstract,
        cover_image_path=body.cover_image_path,
    )
    _normalize_periodical_fields(doc)
    session.add(doc)
    await session.flush()

    await _replace_authors(session, doc.id, body.authors)
    await _replace_topics(session, doc.id, body.topics)
    await session.commit()
    await session.refresh(doc)

    invalidate_category_counts()
    logger.info("Created %s document %s", doc.category, doc.id)
    return await _to_read(session, doc)


async def update_document(
    session: AsyncSession, doc_id: uuid.UUID, body: DocumentUpdate
) -> DocumentRead:
    """Apply the fields the caller actually sent."""
    doc = await _get(session, doc_id)
    update_data = body.model_dump(exclude_unset=True)
    authors = update_data.pop("authors", None)
    topics = update_data.pop("topics", None)

    for field, value in update_data.items():
        # Required columns cannot be cleared
        if value is None and field in ("title", "category", "abstract"):
            continue
        setattr(doc, field, value)
    _normalize_periodical_fields(doc)

    if authors is not None:
        await _replace_authors(session, doc.id, authors)
    if topics is not None:
        await _replace_topics(session, doc.id, topics)

    doc.touch()
    session.add(doc)
    await session.commit()
    await session.refresh(doc)

    invalidate_category_counts()
    return await _to_read(session, doc)


async def soft_delete_document(session: AsyncSession, doc_id: uuid.UUID) -> None:
    doc = await _get(session, doc_id)
    doc.mark_deleted()
    doc.touch()
    session.add(doc)
    await session.commit()

    invalidate_category_counts()
    logger.info("Soft-deleted document %s", doc_id)


async def restore_document(session: AsyncSession, doc_id: uuid.UUID) -> DocumentRead:
    doc = await _get(session, doc_id, include_deleted=True)
    if doc.is_deleted:
        doc.restore()
        doc.touch()
        session.add(doc)
        await session.commit()
        await session.refresh(doc)
        invalidate_category_counts()
        logger.info("Restored document %s", doc_id)
    return await _to_read(session, doc)


def _store_file(path: Path, content: bytes, previous: Path | None) -> None:
    """Write ``content`` at ``path`` and remove a previous copy stored elsewhere."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if previous is not None and previous != path:
        previous.unlink(missing_ok=True)


async def attach_file(
    session: AsyncSession,
    doc_id: uuid.UUID,
    filename: str,
    content: bytes,
) -> DocumentRead:
    """Store an uploaded PDF for a document and record its page count.

    The file lives at ``storage_dir/<category>/<id>.pdf``; an earlier upload
    kept under another category is deleted.

    Raises:
        DocumentNotFound: The document does not exist or is deleted.
        InvalidUpload: Wrong extension, too large, or unreadable PDF.
    """
    settings = get_settings()
    ext = Path(filename).suffix.lower()
    if ext not in PDF_EXTENSIONS:
        raise InvalidUpload(f"Unsupported file type: {ext or '(none)'}. Allowed: .pdf")
    if len(content) > settings.max_upload_size:
        raise InvalidUpload(
            f"File too large. Maximum size is {settings.max_upload_size // (1024 * 1024)} MB."
        )

    doc = await _get(session, doc_id)
    try:
        page_count = read_pdf_page_count(content)
    except ValueError as exc:
        raise InvalidUpload(str(exc)) from exc

    path = Path(settings.storage_dir) / doc.category.value.lower() / f"{doc.id}{ext}"
    previous = Path(doc.file_path) if doc.file_path else None
    await asyncio.to_thread(_store_file, path, content, previous)

    doc.file_path = path.as_posix()
    doc.page_count = page_count
    doc.touch()
    session.add(doc)
    await session.commit()
    await session.refresh(doc)

    logger.info("Stored %d-page file for document %s at %s", page_count, doc_id, path)
    return await _to_read(session, doc)
