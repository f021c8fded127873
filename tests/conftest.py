"""
Shared test fixtures and configuration for entire test suite.

Provides: File-backed SQLite engine with foreign keys, session factory, seeded
subjects/documents/chunks, settings and generation-client fakes
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from askmynotes.application.session_context import SessionContext
from askmynotes.boundary.db.base import Base
from askmynotes.boundary.db.connection import enable_sqlite_foreign_keys
from askmynotes.boundary.db.CRUD.subject_crud import subject_crud
from askmynotes.configs.generation import GenerationSettings
from askmynotes.configs.ingestion import IngestionSettings
from askmynotes.core.grounding.generation import GenerationClient
from tests.factories import add_document


@pytest.fixture
async def test_engine(tmp_path):
    """
    File-backed SQLite async engine with every table created.

    A file (not :memory:) gives each session its own connection, which the
    detached chat-log writes need. The foreign key pragma makes ON DELETE
    CASCADE effective.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Test database session.

    Yields:
        AsyncSession: Session with rollback on teardown
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def device_session() -> SessionContext:
    """Calling device's session."""
    return SessionContext(session_id="device-1")


@pytest.fixture
def other_session() -> SessionContext:
    """A second device that owns nothing."""
    return SessionContext(session_id="device-2")


@pytest.fixture
async def biology_subject(test_async_db, device_session):
    """Committed "Biology" subject owned by device-1."""
    subject = await subject_crud.create(
        test_async_db,
        name="Biology",
        session_id=device_session.session_id,
        document_count=0,
    )
    await test_async_db.commit()
    return subject


@pytest.fixture
async def biology_notes(test_async_db, biology_subject):
    """Biology subject with one note file: bio.txt."""
    await add_document(test_async_db, biology_subject, "bio.txt", ["Mitosis has four phases."])
    return biology_subject


@pytest.fixture
def generation_settings() -> GenerationSettings:
    """Generation settings with defaults and no API key."""
    return GenerationSettings(google_api_key=None)


@pytest.fixture
def ingestion_settings() -> IngestionSettings:
    """Ingestion settings with the default 1000/200 window."""
    return IngestionSettings(chunk_size=1000, chunk_overlap=200)


@pytest.fixture
def fake_chat_model() -> MagicMock:
    """
    Stand-in chat model.

    Configure `ainvoke` for plain text and
    `with_structured_output.return_value.ainvoke` for structured calls.
    """
    model = MagicMock()
    model.ainvoke = AsyncMock()
    model.with_structured_output.return_value.ainvoke = AsyncMock()
    return model


@pytest.fixture
def generation_client(generation_settings, fake_chat_model) -> GenerationClient:
    """GenerationClient whose factory always returns the fake model."""
    return GenerationClient(
        generation_settings,
        model_factory=lambda model, temperature, max_tokens: fake_chat_model,
    )
