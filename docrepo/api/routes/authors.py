"""Author lookup for the document edit form."""

from typing import Annotated

from fastapi import APIRouter, Query

from docrepo.api.deps import Session
from docrepo.models.document import MIN_AUTHOR_QUERY, AuthorRead
from docrepo.services.documents import search_authors

router = APIRouter(prefix="/authors", tags=["authors"])


@router.get("", response_model=list[AuthorRead])
async def find_authors(
    session: Session,
    q: Annotated[str, Query(min_length=MIN_AUTHOR_QUERY, max_length=255)],
    limit: Annotated[int, Query(ge=1, le=50)] = 20,
) -> list[AuthorRead]:
    """Authors whose name contains ``q``, ordered by name."""
    return await search_authors(session, q, limit=limit)
