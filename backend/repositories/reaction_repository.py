"""
Repository for post likes and saves.

Both are plain (post, user) link rows, so one repository class serves both
tables. Counts are always computed from the rows.
"""

import uuid
from typing import Generic, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.db_models import PostLike, PostSave

R = TypeVar("R", PostLike, PostSave)


class ReactionRepository(Generic[R]):
    """Operations on a composite-key (post_id, user_id) reaction table."""

    def __init__(self, model: type[R], db: Session):
        self.model = model
        self.db = db

    def get(self, post_id: uuid.UUID, user_id: uuid.UUID) -> Optional[R]:
        return (
            self.db.query(self.model)
            .filter(self.model.post_id == post_id, self.model.user_id == user_id)
            .first()
        )

    def exists(self, post_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return self.get(post_id, user_id) is not None

    def add(self, post_id: uuid.UUID, user_id: uuid.UUID) -> None:
        self.db.add(self.model(post_id=post_id, user_id=user_id))

    def remove(self, reaction: R) -> None:
        self.db.delete(reaction)

    def count_for_post(self, post_id: uuid.UUID) -> int:
        return (
            self.db.query(func.count())
            .select_from(self.model)
            .filter(self.model.post_id == post_id)
            .scalar()
            or 0
        )

    def commit(self) -> None:
        self.db.commit()


def like_repository(db: Session) -> ReactionRepository[PostLike]:
    return ReactionRepository(PostLike, db)


def save_repository(db: Session) -> ReactionRepository[PostSave]:
    return ReactionRepository(PostSave, db)
