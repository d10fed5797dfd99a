"""
Comment repository for database operations.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from repositories.base import BaseRepository
from repositories.db_models import Comment, ModerationStatus, Post


class CommentRepository(BaseRepository[Comment]):
    """
    Repository for Comment entity operations.

    Soft-deleted comments are excluded from every listing.
    """

    def __init__(self, db: Session):
        super().__init__(Comment, db)

    def get_active(self, comment_id: uuid.UUID) -> Optional[Comment]:
        """Get a comment unless it is soft-deleted."""
        return (
            self.db.query(Comment)
            .options(joinedload(Comment.author))
            .filter(Comment.id == comment_id, Comment.is_deleted.is_(False))
            .first()
        )

    def get_for_post(
        self, post_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Comment], int]:
        """
        Get comments of a post, newest first.

        Args:
            post_id: Post ID
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (comments, total)
        """
        q = self.db.query(Comment).filter(
            Comment.post_id == post_id, Comment.is_deleted.is_(False)
        )
        total = q.count()
        comments = (
            q.options(joinedload(Comment.author))
            .order_by(Comment.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return comments, total

    def get_by_author(
        self, author_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Comment], int]:
        """Comments written by a user on posts that are still visible."""
        q = (
            self.db.query(Comment)
            .join(Post, Post.id == Comment.post_id)
            .filter(
                Comment.author_id == author_id,
                Comment.is_deleted.is_(False),
                Post.is_deleted.is_(False),
                Post.moderation_status != ModerationStatus.HIDDEN,
            )
        )
        total = q.count()
        comments = (
            q.options(joinedload(Comment.author))
            .order_by(Comment.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return comments, total
