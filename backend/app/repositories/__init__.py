# Repositories package init
"""
Books API - Repositories (Storage Accessor)
=============================================

What:  Row-level CRUD against the relational store.

Inventory:
    - base.py:             CrudRepository (abstract) and SQLAlchemyRepository
    - book_repository.py:  BookRepository for the `books` table
"""

from app.repositories.base import CrudRepository, SQLAlchemyRepository
from app.repositories.book_repository import BookRepository

__all__ = ["CrudRepository", "SQLAlchemyRepository", "BookRepository"]
