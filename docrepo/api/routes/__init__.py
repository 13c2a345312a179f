"""API router aggregation."""

from fastapi import APIRouter

from docrepo.api.routes.auth import router as auth_router
from docrepo.api.routes.authors import router as authors_router
from docrepo.api.routes.categories import router as categories_router
from docrepo.api.routes.documents import router as documents_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(authors_router)
api_router.include_router(categories_router)
api_router.include_router(documents_router)
