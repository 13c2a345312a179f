"""Category counts: non-deleted documents grouped by category."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from docrepo.core import cache
from docrepo.core.config import get_settings
from docrepo.models.document import CategoryCount, Document

logger = logging.getLogger(__name__)

CACHE_FAMILY = "categories"


async def list_categories(session: AsyncSession) -> list[CategoryCount]:
    """Return ``[{name, count}]`` ordered by category name.

    A storage failure is logged and yields an empty list. Callers must read
    an empty result as "no counts available", not as "no documents".
    """
    cache_key = (CACHE_FAMILY,)
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    stmt = (
        select(Document.category, func.count())
        .where(Document.is_deleted == False)  # noqa: E712
        .group_by(Document.category)
    )
    try:
        rows = (await session.execute(stmt)).all()
    except SQLAlchemyError:
        logger.exception("Failed to count documents by category")
        return []

    categories = sorted(
        (CategoryCount(name=str(category), count=int(count)) for category, count in rows),
        key=lambda c: c.name,
    )
    cache.put(cache_key, categories, ttl=get_settings().category_cache_ttl)
    return categories


def invalidate_category_counts() -> None:
    """Called after any document write."""
    cache.invalidate_family(CACHE_FAMILY)
