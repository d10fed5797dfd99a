"""
Post repository for database operations.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session, joinedload

from repositories.base import BaseRepository, like_pattern, parse_uuid
from repositories.db_models import (
    Comment,
    ModerationStatus,
    Post,
    PostLike,
    PostSave,
    PostTag,
    Profile,
    Report,
    Tag,
)

# Sort keys accepted by get_feed()
COUNT_SORTS = ("likes", "saves", "comments")


class PostRepository(BaseRepository[Post]):
    """
    Repository for Post entity operations.

    "Visible" posts are the ones the public may see: not soft-deleted and
    not hidden by a moderator.
    """

    def __init__(self, db: Session):
        super().__init__(Post, db)

    @staticmethod
    def _only_visible(query: Query) -> Query:
        return query.filter(
            Post.is_deleted.is_(False),
            Post.moderation_status != ModerationStatus.HIDDEN,
        )

    def _base_query(self) -> Query:
        return self.db.query(Post).options(joinedload(Post.author))

    def get_visible(self, post_id: uuid.UUID) -> Optional[Post]:
        """Get a post only if it is publicly visible."""
        return self._only_visible(
            self._base_query().filter(Post.id == post_id)
        ).first()

    def get_not_deleted(self, post_id: uuid.UUID) -> Optional[Post]:
        """Get a post unless it is soft-deleted (hidden posts included)."""
        return (
            self._base_query()
            .filter(Post.id == post_id, Post.is_deleted.is_(False))
            .first()
        )

    def get_with_author(self, post_id: uuid.UUID) -> Optional[Post]:
        """Get a post regardless of moderation state."""
        return self._base_query().filter(Post.id == post_id).first()

    def _count_subquery(self, sort: str):
        if sort == "likes":
            column = PostLike.post_id
            q = self.db.query(column.label("post_id"), func.count().label("n"))
        elif sort == "saves":
            column = PostSave.post_id
            q = self.db.query(column.label("post_id"), func.count().label("n"))
        else:
            column = Comment.post_id
            q = self.db.query(column.label("post_id"), func.count().label("n")).filter(
                Comment.is_deleted.is_(False)
            )
        return q.group_by(column).subquery()

    def get_feed(
        self,
        search: Optional[str] = None,
        tag_slug: Optional[str] = None,
        tag_name: Optional[str] = None,
        verified_only: bool = False,
        sort: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Post], int]:
        """
        Public feed of visible posts.

        Args:
            search: Substring matched against title and content
            tag_slug: Keep posts carrying the tag with this slug...
            tag_name: ...or with this (case-insensitive) name
            verified_only: Keep posts of verified authors only
            sort: One of COUNT_SORTS, or None for newest first
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (posts, total matching)
        """
        q = self._only_visible(self._base_query())

        if search and search.strip():
            pattern = like_pattern(search)
            q = q.filter(
                or_(
                    func.lower(Post.title).like(pattern),
                    func.lower(Post.content).like(pattern),
                )
            )

        if tag_slug or tag_name:
            tag_match = []
            if tag_slug:
                tag_match.append(Tag.slug == tag_slug)
            if tag_name:
                tag_match.append(func.lower(Tag.name) == tag_name.strip().lower())
            tagged = (
                select(PostTag.post_id)
                .join(Tag, Tag.id == PostTag.tag_id)
                .where(or_(*tag_match))
            )
            q = q.filter(Post.id.in_(tagged))

        if verified_only:
            verified_authors = select(Profile.id).where(Profile.is_verified.is_(True))
            q = q.filter(Post.author_id.in_(verified_authors))

        total = q.count()

        if sort in COUNT_SORTS:
            counts = self._count_subquery(sort)
            q = q.outerjoin(counts, counts.c.post_id == Post.id).order_by(
                func.coalesce(counts.c.n, 0).desc(), Post.created_at.desc()
            )
        else:
            q = q.order_by(Post.created_at.desc())

        return q.offset(skip).limit(limit).all(), total

    def search_admin(
        self,
        search: Optional[str] = None,
        status: Optional[ModerationStatus] = None,
        deleted: bool = False,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Post], int]:
        """
        Admin post listing.

        Args:
            search: Matches title or author name; an exact UUID matches the
                post id or the author id
            status: Restrict to one moderation status
            deleted: List soft-deleted posts instead of live ones
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (posts, total matching)
        """
        q = self._base_query().filter(Post.is_deleted.is_(deleted))
        if status is not None:
            q = q.filter(Post.moderation_status == status)

        if search and search.strip():
            pattern = like_pattern(search)
            matching_authors = select(Profile.id).where(
                func.lower(Profile.name).like(pattern)
            )
            conditions = [
                func.lower(Post.title).like(pattern),
                Post.author_id.in_(matching_authors),
            ]
            as_uuid = parse_uuid(search)
            if as_uuid is not None:
                conditions.extend([Post.id == as_uuid, Post.author_id == as_uuid])
            q = q.filter(or_(*conditions))

        total = q.count()
        posts = q.order_by(Post.created_at.desc()).offset(skip).limit(limit).all()
        return posts, total

    def get_by_author(
        self,
        author_id: uuid.UUID,
        visible_only: bool = True,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Post], int]:
        """
        Posts of one author, newest first.

        Soft-deleted posts are never returned. Hidden posts are only
        returned when ``visible_only`` is False (the author's own listing).
        """
        q = self._base_query().filter(Post.author_id == author_id)
        if visible_only:
            q = self._only_visible(q)
        else:
            q = q.filter(Post.is_deleted.is_(False))
        total = q.count()
        posts = q.order_by(Post.created_at.desc()).offset(skip).limit(limit).all()
        return posts, total

    def get_reacted_by(
        self,
        reaction_model: type[PostLike] | type[PostSave],
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Post], int]:
        """Visible posts the user liked or saved, most recent reaction first."""
        q = self._only_visible(
            self._base_query()
            .join(reaction_model, reaction_model.post_id == Post.id)
            .filter(reaction_model.user_id == user_id)
        )
        total = q.count()
        posts = (
            q.order_by(reaction_model.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return posts, total

    # Batch counts keyed by post id

    def _counts_by_post(self, column, post_ids: List[uuid.UUID], *filters) -> dict:
        if not post_ids:
            return {}
        rows = (
            self.db.query(column, func.count())
            .filter(column.in_(post_ids), *filters)
            .group_by(column)
            .all()
        )
        return {post_id: count for post_id, count in rows}

    def get_like_counts(self, post_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        return self._counts_by_post(PostLike.post_id, post_ids)

    def get_save_counts(self, post_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        return self._counts_by_post(PostSave.post_id, post_ids)

    def get_comment_counts(self, post_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        """Counts only comments that are not soft-deleted."""
        return self._counts_by_post(
            Comment.post_id, post_ids, Comment.is_deleted.is_(False)
        )

    def get_report_counts(self, post_ids: List[uuid.UUID]) -> dict[uuid.UUID, int]:
        return self._counts_by_post(Report.post_id, post_ids)

    def get_tags_for_posts(self, post_ids: List[uuid.UUID]) -> dict[uuid.UUID, List[Tag]]:
        """Tags of each post, ordered by name."""
        if not post_ids:
            return {}
        rows = (
            self.db.query(PostTag.post_id, Tag)
            .join(Tag, Tag.id == PostTag.tag_id)
            .filter(PostTag.post_id.in_(post_ids))
            .order_by(Tag.name)
            .all()
        )
        tags: dict[uuid.UUID, List[Tag]] = {}
        for post_id, tag in rows:
            tags.setdefault(post_id, []).append(tag)
        return tags

    def replace_tags(self, post_id: uuid.UUID, tag_ids: List[uuid.UUID]) -> None:
        """
        Replace the tag links of a post without committing.

        The caller commits together with the post row.
        """
        self.db.query(PostTag).filter(PostTag.post_id == post_id).delete(
            synchronize_session="fetch"
        )
        self.db.add_all(
            [PostTag(post_id=post_id, tag_id=tag_id) for tag_id in dict.fromkeys(tag_ids)]
        )
