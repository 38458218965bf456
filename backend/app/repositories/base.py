"""
Books API - Generic Storage Accessor
======================================

What:  Abstract CRUD contract (`CrudRepository`) plus its async SQLAlchemy
       implementation (`SQLAlchemyRepository`).
How:   Concrete repositories subclass SQLAlchemyRepository and set `model`.
       Each instance wraps the request's AsyncSession; writes are flushed,
       and the session dependency commits or rolls back at request end.
Who:   BookService depends on the abstract contract only.

Contract:
    save(entity)        insert when id is unset/0, otherwise upsert by id
    find_by_id(id)      entity or None
    find_all()          every row, ascending id
    exists_by_id(id)    bool
    delete_by_id(id)    no-op when the id is missing
    delete_all()
    count()
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

ModelT = TypeVar("ModelT")
IdT = TypeVar("IdT")
RowT = TypeVar("RowT", bound=Base)


class CrudRepository(ABC, Generic[ModelT, IdT]):
    """Abstract async CRUD interface over one entity type."""

    @abstractmethod
    async def save(self, entity: ModelT) -> ModelT:
        """
        Persist `entity` and return the stored version.

        An entity without an id (None or 0) is inserted and receives an id
        from the database. An entity with an id overwrites the row with that
        id, or creates it when absent.
        """

    @abstractmethod
    async def find_by_id(self, entity_id: IdT) -> Optional[ModelT]:
        """Return the entity with the given id, or None if not found."""

    @abstractmethod
    async def find_all(self) -> List[ModelT]:
        """Return every entity (empty list if none)."""

    @abstractmethod
    async def exists_by_id(self, entity_id: IdT) -> bool:
        ...

    @abstractmethod
    async def delete_by_id(self, entity_id: IdT) -> None:
        """Remove the entity with the given id. Missing ids are ignored."""

    @abstractmethod
    async def delete_all(self) -> None:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...


class SQLAlchemyRepository(CrudRepository[RowT, int]):
    """
    CrudRepository backed by an AsyncSession and an integer `id` primary key.

    Subclasses only declare the mapped class:

        class BookRepository(SQLAlchemyRepository[Book]):
            model = Book
    """

    model: Type[RowT]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, entity: RowT) -> RowT:
        if not entity.id:
            entity.id = None
            self.session.add(entity)
            await self.session.flush()
            return entity

        # merge() loads the row by primary key (or schedules an INSERT) and
        # copies the entity's state onto it
        merged = await self.session.merge(entity)
        await self.session.flush()
        return merged

    async def find_by_id(self, entity_id: int) -> Optional[RowT]:
        return await self.session.get(self.model, entity_id)

    async def find_all(self) -> List[RowT]:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def exists_by_id(self, entity_id: int) -> bool:
        result = await self.session.execute(
            select(self.model.id).where(self.model.id == entity_id).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def delete_by_id(self, entity_id: int) -> None:
        await self.session.execute(delete(self.model).where(self.model.id == entity_id))

    async def delete_all(self) -> None:
        await self.session.execute(delete(self.model))

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
