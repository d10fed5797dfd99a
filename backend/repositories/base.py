"""
Base repository class providing common database operations.
"""

import uuid
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Base repository providing common persistence operations.

    Type parameter T should be a SQLAlchemy model class keyed by a UUID ``id``.
    Composite-key models (likes, saves, post tags) use their own queries.
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

    def get_by_id(self, id: uuid.UUID) -> T | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self.db.query(self.model).filter(self.model.id == id).first()

    def add(self, entity: T) -> None:
        """
        Add entity to session without committing.

        Use this when several rows must land in the same transaction.
        """
        self.db.add(entity)

    def create(self, entity: T) -> T:
        """
        Create new entity and commit.

        Args:
            entity: Entity to create

        Returns:
            Created entity, refreshed from the database
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        """Commit pending changes on an entity and refresh it."""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """Hard-delete entity and commit."""
        self.db.delete(entity)
        self.db.commit()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.db.flush()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.db.rollback()

    def refresh(self, entity: T) -> None:
        """Refresh entity from database."""
        self.db.refresh(entity)


def parse_uuid(value: str | None) -> uuid.UUID | None:
    """Return the UUID spelled by ``value``, or None when it is not one."""
    if not value:
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        return None


def like_pattern(value: str) -> str:
    """Case-insensitive substring pattern for ``func.lower(col).like(...)``."""
    return f"%{value.strip().lower()}%"
