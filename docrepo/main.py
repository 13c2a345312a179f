"""FastAPI application entrypoint."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from docrepo.api.routes import api_router
from docrepo.core.config import get_settings
from docrepo.core.database import dispose_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    logger.info("Database ready")
    yield
    await dispose_db()


app = FastAPI(
    title="DocRepo",
    version="0.1.0",
    description="Catalog of theses, dissertations and research compilations",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────
_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── API routes ───────────────────────────────────────────────
app.include_router(api_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}


# ── Uploaded files ───────────────────────────────────────────
if os.path.isdir(_settings.storage_dir):
    app.mount("/storage", StaticFiles(directory=_settings.storage_dir), name="storage")
