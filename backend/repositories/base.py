"""
Base repository class providing common database operations.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Base repository for models keyed by a string `id`.

    Every write commits immediately; a request touches one aggregate at a time.
    """

    def __init__(self, model: type[T], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get_by_id(self, id: str) -> T | None:
        """Get entity by primary key, or None."""
        return self.db.get(self.model, id)

    def create(self, entity: T) -> T:
        """
        Insert a new entity and return it refreshed.

        Defaults such as generated IDs and timestamps are loaded back.

        Args:
            entity: Entity to create

        Returns:
            Created entity
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        """Commit pending changes on an entity and return it refreshed."""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """
        Delete entity. ORM cascades remove dependent rows.

        Args:
            entity: Entity to delete
        """
        self.db.delete(entity)
        self.db.commit()

    def rollback(self) -> None:
        """Discard the failed transaction so the session can be reused."""
        self.db.rollback()
