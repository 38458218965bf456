"""
Books API - Application Package Initializer
=============================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn, Alembic and pytest (`from app.config import settings`).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Orchestration)    │  ← BookService, not-found checks
    ├─────────────────────────────────────┤
    │     Repositories (Storage Accessor) │  ← CrudRepository / BookRepository
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
