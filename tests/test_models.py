"""Tests for shared column helpers and engine options."""

from datetime import timezone

from sqlalchemy.pool import StaticPool

from docrepo.core.database import _engine_options
from docrepo.models.base import utcnow
from docrepo.models.document import Document, DocumentType


def test_utcnow_is_timezone_aware():
    now = utcnow()
    assert now.tzinfo is not None
    assert now.utcoffset() == timezone.utc.utcoffset(now)


def test_new_document_timestamps_are_aware():
    doc = Document(title="Tidal Flats", category=DocumentType.THESIS)
    assert doc.created_at.tzinfo is not None
    assert doc.updated_at.tzinfo is not None


def test_soft_delete_stamps_aware_time_and_restore_clears_it():
    doc = Document(title="Tidal Flats", category=DocumentType.THESIS)

    doc.mark_deleted()
    assert doc.is_deleted is True
    assert doc.deleted_at.tzinfo is not None

    doc.restore()
    assert doc.is_deleted is False
    assert doc.deleted_at is None


def test_touch_moves_updated_at_forward():
    doc = Document(title="Tidal Flats", category=DocumentType.THESIS)
    before = doc.updated_at
    doc.touch()
    assert doc.updated_at >= before
    assert doc.updated_at.tzinfo is not None


def test_in_memory_sqlite_shares_one_connection():
    options = _engine_options("sqlite+aiosqlite://")
    assert options["poolclass"] is StaticPool
    assert options["connect_args"] == {"check_same_thread": False}


def test_file_sqlite_uses_default_pool():
    options = _engine_options("sqlite+aiosqlite:///./catalog.db")
    assert "poolclass" not in options


def test_postgres_pings_pooled_connections():
    options = _engine_options("postgresql+asyncpg://docrepo:secret@db/docrepo")
    assert options["pool_pre_ping"] is True
    assert "connect_args" not in options
