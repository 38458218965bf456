"""
Books API - Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Repository and API tests run against a throwaway SQLite file per test
       (aiosqlite); service tests use a mocked repository.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: async engine on tmp_path/test.db with the schema created
    │   ├── db_session: AsyncSession for repository tests
    │   │   └── book_repository: BookRepository over db_session
    │   └── test_client: HTTPX AsyncClient with get_db_session overridden
    ├── mock_book_repository: AsyncMock shaped like BookRepository
    └── sample_books: the three books used across tests
"""

import os

# Must run before any app import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from app.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_schema,
    get_db_session,
)
from app.repositories.book_repository import BookRepository  # noqa: E402


@pytest.fixture
def sample_books():
    """(title, author) pairs, in insertion order."""
    return [
        ("Dom Casmurro", "Machado de Assis"),
        ("O Senhor dos Anéis", "J.R.R. Tolkien"),
        ("1984", "George Orwell"),
    ]


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database with the `books` table, disposed after the test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = build_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def book_repository(db_session) -> BookRepository:
    return BookRepository(db_session)


@pytest.fixture
def mock_book_repository():
    """
    AsyncMock with BookRepository's interface.

    Usage:
        mock_book_repository.find_by_id.return_value = Book(id=1, ...)
        service = BookService(mock_book_repository)
    """
    return AsyncMock(spec=BookRepository)


@pytest_asyncio.fixture
async def test_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    get_db_session is overridden with sessions on the per-test database,
    keeping the same commit-on-success / rollback-on-error behaviour.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/books")
            assert response.status_code == 200
    """
    from app.main import app

    session_factory = build_session_factory(db_engine)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
