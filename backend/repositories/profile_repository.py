"""
Profile repository for database operations.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository, like_pattern, parse_uuid


class ProfileRepository(BaseRepository[db_models.Profile]):
    """
    Repository for Profile entity operations.
    """

    def __init__(self, db: Session):
        super().__init__(db_models.Profile, db)

    def search(
        self, query: Optional[str], skip: int = 0, limit: int = 20
    ) -> Tuple[List[db_models.Profile], int]:
        """
        Search profiles by id, name or email, newest first.

        Args:
            query: Free text; an exact UUID matches the profile id
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (profiles, total matching)
        """
        q = self.db.query(db_models.Profile)
        if query and query.strip():
            pattern = like_pattern(query)
            conditions = [
                func.lower(db_models.Profile.name).like(pattern),
                func.lower(db_models.Profile.email).like(pattern),
            ]
            as_uuid = parse_uuid(query)
            if as_uuid is not None:
                conditions.append(db_models.Profile.id == as_uuid)
            q = q.filter(or_(*conditions))

        total = q.count()
        profiles = (
            q.order_by(db_models.Profile.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return profiles, total

    def count_posts(self, user_id: uuid.UUID, public_only: bool = False) -> int:
        """Count posts authored by the user, all or only publicly visible ones."""
        q = self.db.query(func.count(db_models.Post.id)).filter(
            db_models.Post.author_id == user_id
        )
        if public_only:
            q = q.filter(
                db_models.Post.is_deleted.is_(False),
                db_models.Post.moderation_status != db_models.ModerationStatus.HIDDEN,
            )
        return q.scalar() or 0

    def count_comments(self, user_id: uuid.UUID) -> int:
        return (
            self.db.query(func.count(db_models.Comment.id))
            .filter(db_models.Comment.author_id == user_id)
            .scalar()
            or 0
        )

    def count_reports_made(self, user_id: uuid.UUID) -> int:
        return (
            self.db.query(func.count(db_models.Report.id))
            .filter(db_models.Report.reporter_id == user_id)
            .scalar()
            or 0
        )

    def count_reports_against(self, user_id: uuid.UUID) -> int:
        return (
            self.db.query(func.count(db_models.Report.id))
            .filter(db_models.Report.target_user_id == user_id)
            .scalar()
            or 0
        )

    def count_reactions_received(
        self,
        reaction_model: type[db_models.PostLike] | type[db_models.PostSave],
        user_id: uuid.UUID,
    ) -> int:
        """Likes or saves on the user's publicly visible posts."""
        return (
            self.db.query(func.count())
            .select_from(reaction_model)
            .join(db_models.Post, db_models.Post.id == reaction_model.post_id)
            .filter(
                db_models.Post.author_id == user_id,
                db_models.Post.is_deleted.is_(False),
                db_models.Post.moderation_status != db_models.ModerationStatus.HIDDEN,
            )
            .scalar()
            or 0
        )

    def get_post_counts(self, user_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        """Batch count of posts per author."""
        if not user_ids:
            return {}
        rows = (
            self.db.query(db_models.Post.author_id, func.count(db_models.Post.id))
            .filter(db_models.Post.author_id.in_(user_ids))
            .group_by(db_models.Post.author_id)
            .all()
        )
        return {user_id: count for user_id, count in rows}

    def get_reports_against_counts(
        self, user_ids: List[uuid.UUID]
    ) -> dict[uuid.UUID, int]:
        """Batch count of reports targeting each user."""
        if not user_ids:
            return {}
        rows = (
            self.db.query(
                db_models.Report.target_user_id, func.count(db_models.Report.id)
            )
            .filter(db_models.Report.target_user_id.in_(user_ids))
            .group_by(db_models.Report.target_user_id)
            .all()
        )
        return {user_id: count for user_id, count in rows}
