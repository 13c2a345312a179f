"""Shared test fixtures: async SQLite in-memory DB + test client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import date  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import docrepo.models  # noqa: E402, F401
from docrepo.core import cache  # noqa: E402
from docrepo.core.database import get_session  # noqa: E402
from docrepo.main import app  # noqa: E402
from docrepo.models.document import DocumentCreate, DocumentRead, DocumentType  # noqa: E402
from docrepo.models.user import UserRole  # noqa: E402
from docrepo.services.documents import create_document  # noqa: E402
from docrepo.services.users import create_user  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"
EDITOR_EMAIL = "editor@example.com"


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite://", echo=False, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    cache.clear()
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()
    cache.clear()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _login_headers(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def admin_headers(client: AsyncClient, session: AsyncSession) -> dict[str, str]:
    """Create an admin account and return bearer headers from a real login."""
    await create_user(session, ADMIN_EMAIL, ADMIN_PASSWORD, role=UserRole.ADMIN)
    return await _login_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
async def editor_headers(client: AsyncClient, session: AsyncSession) -> dict[str, str]:
    """Bearer headers for an editor: may create and edit, not delete."""
    await create_user(session, EDITOR_EMAIL, ADMIN_PASSWORD, role=UserRole.EDITOR)
    return await _login_headers(client, EDITOR_EMAIL, ADMIN_PASSWORD)


MakeDocument = Callable[..., Awaitable[DocumentRead]]


@pytest.fixture
def make_document(session: AsyncSession) -> MakeDocument:
    """Factory inserting a document straight through the service layer."""

    async def _make(
        title: str = "Untitled",
        category: DocumentType = DocumentType.THESIS,
        published: date | None = None,
        authors: list[str] | None = None,
        topics: list[str] | None = None,
        **extra,
    ) -> DocumentRead:
        body = DocumentCreate(
            title=title,
            category=category,
            publication_date=published,
            authors=authors or [],
            topics=topics or [],
            **extra,
        )
        return await create_document(session, body)

    return _make
