"""
Base repository.
Generic CRUD operations plus the conditional update primitive.
"""
from typing import TypeVar, Generic, Optional, List, Type
from sqlalchemy import update
from sqlmodel import Session, select

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository.

    Provides the common operations for any model.

    Usage:
        class MyRepository(BaseRepository[MyModel]):
            def __init__(self, session: Session):
                super().__init__(session, MyModel)
    """

    def __init__(self, session: Session, model: Type[T]):
        """
        Initializes the repository.

        Args:
            session: Database session
            model: SQLModel table class
        """
        self.session = session
        self.model = model

    def get_by_id(self, id: str) -> Optional[T]:
        """
        Returns a record by ID.

        Args:
            id: Record ID

        Returns:
            The record or None if it does not exist
        """
        return self.session.get(self.model, id)

    def get_fresh(self, id: str) -> Optional[T]:
        """
        Returns a record by ID bypassing the session identity map,
        so the latest committed row is read.
        """
        query = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        return self.session.exec(query).first()

    def get_all(self) -> List[T]:
        """
        Returns every record.

        Returns:
            List of records
        """
        return list(self.session.exec(select(self.model)).all())

    def add(self, obj: T) -> T:
        """
        Adds a record to the current transaction and flushes it,
        without committing.
        """
        self.session.add(obj)
        self.session.flush()
        return obj

    def compare_and_set(self, id: str, expected: dict, values: dict) -> bool:
        """
        Updates a single row only if its current column values match.

        The check and the write are one UPDATE statement, so concurrent
        writers cannot interleave between them. Does not commit, and does
        not refresh objects already loaded in the session: they are expired
        on commit.

        Args:
            id: Row ID
            expected: Column -> expected current value (None means IS NULL)
            values: Column -> new value

        Returns:
            True if the row was updated, False if it did not match
        """
        conditions = [self.model.id == id]
        for column, value in expected.items():
            attr = getattr(self.model, column)
            conditions.append(attr.is_(None) if value is None else attr == value)

        statement = (
            update(self.model)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        return result.rowcount == 1
