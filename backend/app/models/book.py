"""
Books API - Book SQLAlchemy Model
===================================

What:  ORM model representing the `books` table.
Who:   Used by BookRepository for CRUD operations and by Alembic for schema management.

Table Design:
    - id: 64-bit identity primary key assigned by the database on insert
    - title / author: unconstrained text, stored exactly as received
"""

from typing import Optional

from sqlalchemy import BigInteger, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# SQLite only auto-increments columns declared exactly as INTEGER PRIMARY KEY
BookId = BigInteger().with_variant(Integer(), "sqlite")


class Book(Base):
    """
    A book row.

    Lifecycle:
        1. Inserted without an id; the database assigns one
        2. Replaced wholesale on update (title and author overwritten)
        3. Hard-deleted by id
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(
        BookId,
        primary_key=True,
        autoincrement=True,
        comment="Surrogate key assigned by the database",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[str] = mapped_column(Text, nullable=False)

    def __init__(self, title: str, author: str, id: Optional[int] = None) -> None:
        # 0 means "not persisted yet", same as None
        if id:
            super().__init__(id=id, title=title, author=author)
        else:
            super().__init__(title=title, author=author)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author='{self.author}')>"
