"""Category counts for the catalog sidebar."""

from fastapi import APIRouter

from docrepo.api.deps import Session
from docrepo.models.document import CategoryCount
from docrepo.services.categories import list_categories

router = APIRouter(tags=["categories"])


@router.get("/categories", response_model=list[CategoryCount])
async def get_categories(session: Session) -> list[CategoryCount]:
    """Non-deleted document counts per category, ordered by name."""
    return await list_categories(session)


# Older admin pages request the singular path.
router.add_api_route(
    "/category",
    get_categories,
    methods=["GET"],
    response_model=list[CategoryCount],
    include_in_schema=False,
)
