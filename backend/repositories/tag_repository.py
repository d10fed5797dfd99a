"""
Tag repository for database operations.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from repositories.base import BaseRepository, like_pattern
from repositories.db_models import Post, PostTag, Tag


class TagRepository(BaseRepository[Tag]):
    """
    Repository for Tag entity operations.
    """

    def __init__(self, db: Session):
        """
        Initialize TagRepository.

        Args:
            db: Database session
        """
        super().__init__(Tag, db)

    def get_by_slug(self, slug: str) -> Optional[Tag]:
        return self.db.query(Tag).filter(Tag.slug == slug).first()

    def slug_taken(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """
        Check whether another tag already uses the slug.

        Args:
            slug: Normalized slug
            exclude_id: Tag being updated, ignored in the check

        Returns:
            True if the slug belongs to a different tag
        """
        q = self.db.query(Tag.id).filter(Tag.slug == slug)
        if exclude_id is not None:
            q = q.filter(Tag.id != exclude_id)
        return q.first() is not None

    def _search_query(self, query: Optional[str]):
        q = self.db.query(Tag)
        if query and query.strip():
            pattern = like_pattern(query)
            q = q.filter(
                or_(func.lower(Tag.name).like(pattern), Tag.slug.like(pattern))
            )
        return q

    def search_tags(self, query: Optional[str], limit: int = 50) -> List[Tag]:
        """
        Search tags by name or slug (for pickers and autocomplete).

        Args:
            query: Search query, all tags when empty
            limit: Maximum results to return

        Returns:
            List of matching tags ordered by name
        """
        return self._search_query(query).order_by(Tag.name).limit(limit).all()

    def search_admin(
        self, query: Optional[str], skip: int = 0, limit: int = 20
    ) -> Tuple[List[Tag], int]:
        """Admin tag listing ordered by slug, with total count."""
        q = self._search_query(query)
        total = q.count()
        tags = q.order_by(Tag.slug).offset(skip).limit(limit).all()
        return tags, total

    def count_posts(self, tag_id: uuid.UUID) -> int:
        """
        Count posts linked to a tag.

        Deletion protection counts every link, including links of
        soft-deleted posts, since those rows still reference the tag.
        """
        return (
            self.db.query(func.count(PostTag.post_id))
            .filter(PostTag.tag_id == tag_id)
            .scalar()
            or 0
        )

    def get_post_counts(self, tag_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        """Batch count of non-deleted posts per tag."""
        if not tag_ids:
            return {}
        rows = (
            self.db.query(PostTag.tag_id, func.count(PostTag.post_id))
            .join(Post, Post.id == PostTag.post_id)
            .filter(PostTag.tag_id.in_(tag_ids), Post.is_deleted.is_(False))
            .group_by(PostTag.tag_id)
            .all()
        )
        return {tag_id: count for tag_id, count in rows}

    def get_or_add(self, name: str, slug: str) -> Tag:
        """
        Get a tag by slug or stage a new one without committing.

        Used inside the post create/update transaction. The insert runs in a
        savepoint so losing a race on the slug only rolls back the tag row,
        and the winner's tag is returned instead.
        """
        existing = self.get_by_slug(slug)
        if existing:
            return existing
        tag = Tag(name=name, slug=slug)
        try:
            with self.db.begin_nested():
                self.db.add(tag)
                self.db.flush()
        except IntegrityError:
            existing = self.get_by_slug(slug)
            if existing is None:
                raise
            return existing
        return tag
