"""
Service for staff moderation of posts.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import has_more, page_offset
from models.exceptions import (
    InvalidActionException,
    MissingActionException,
    PostNotFoundException,
)
from repositories.post_repository import PostRepository
from services.post_service import author_summary

# Actions that only change the moderation status
_STATUS_ACTIONS = {
    schemas.ModerationAction.MARK_OK: db_models.ModerationStatus.OK,
    schemas.ModerationAction.MARK_NEEDS_FIX: db_models.ModerationStatus.NEEDS_FIX,
    schemas.ModerationAction.HIDE: db_models.ModerationStatus.HIDDEN,
}


def parse_action(raw: Optional[str]) -> schemas.ModerationAction:
    """
    Parse a moderation action tag.

    Raises:
        MissingActionException: Nothing supplied
        InvalidActionException: Unknown action
    """
    action = (raw or "").strip()
    if not action:
        raise MissingActionException()
    try:
        return schemas.ModerationAction(action)
    except ValueError:
        raise InvalidActionException(action)


class ModerationService:
    """Service for admin post listing and moderation actions."""

    @staticmethod
    def apply_action(
        db: Session,
        post_id: uuid.UUID,
        actor_id: uuid.UUID,
        action: Optional[str],
    ) -> db_models.Post:
        """
        Apply a moderation action to a post.

        ``soft_delete`` records who deleted the post and when; ``restore``
        clears those fields. The other actions set the moderation status.
        Concurrent actions on the same post are last-write-wins.

        Raises:
            MissingActionException: No action supplied
            InvalidActionException: Unknown action
            PostNotFoundException: Post does not exist
        """
        parsed = parse_action(action)

        repo = PostRepository(db)
        post = repo.get_by_id(post_id)
        if post is None:
            raise PostNotFoundException()

        now = datetime.now(timezone.utc)
        if parsed in _STATUS_ACTIONS:
            post.moderation_status = _STATUS_ACTIONS[parsed]
        elif parsed == schemas.ModerationAction.SOFT_DELETE:
            post.is_deleted = True
            post.deleted_at = now
            post.deleted_by_id = actor_id
        else:
            post.is_deleted = False
            post.deleted_at = None
            post.deleted_by_id = None
        post.updated_at = now

        repo.update(post)
        logger.info(f"Moderation: {parsed.value} on post {post.id} by {actor_id}")
        return post

    @staticmethod
    def list_posts(
        db: Session,
        page: int,
        limit: int,
        search: Optional[str] = None,
        status: schemas.AdminPostFilter = schemas.AdminPostFilter.ALL,
    ) -> dict[str, Any]:
        """
        Admin post listing with report, like and comment counts.

        ``deleted`` lists soft-deleted posts; every other filter lists live
        posts, optionally restricted to one moderation status.

        Returns:
            Dict shaped like schemas.AdminPostList
        """
        deleted = status == schemas.AdminPostFilter.DELETED
        moderation_status = (
            None
            if status in (schemas.AdminPostFilter.ALL, schemas.AdminPostFilter.DELETED)
            else db_models.ModerationStatus(status.value)
        )

        repo = PostRepository(db)
        posts, total = repo.search_admin(
            search=search,
            status=moderation_status,
            deleted=deleted,
            skip=page_offset(page, limit),
            limit=limit,
        )
        ids = [post.id for post in posts]
        reports = repo.get_report_counts(ids)
        likes = repo.get_like_counts(ids)
        comments = repo.get_comment_counts(ids)
        tags = repo.get_tags_for_posts(ids)

        items = [
            {
                "id": post.id,
                "title": post.title,
                "moderation_status": post.moderation_status,
                "is_deleted": post.is_deleted,
                "deleted_at": post.deleted_at,
                "created_at": post.created_at,
                "updated_at": post.updated_at,
                "author": author_summary(post.author),
                "tags": tags.get(post.id, []),
                "reports_count": reports.get(post.id, 0),
                "likes_count": likes.get(post.id, 0),
                "comments_count": comments.get(post.id, 0),
            }
            for post in posts
        ]
        return {
            "items": items,
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def get_post_detail(db: Session, post_id: uuid.UUID) -> dict[str, Any]:
        """
        Full post detail for staff, including soft-deleted and hidden posts.

        Raises:
            PostNotFoundException: Post does not exist
        """
        repo = PostRepository(db)
        post = repo.get_with_author(post_id)
        if post is None:
            raise PostNotFoundException()

        ids = [post.id]
        return {
            "id": post.id,
            "title": post.title,
            "content": post.content,
            "play_store_url": post.play_store_url,
            "google_group_url": post.google_group_url,
            "moderation_status": post.moderation_status,
            "is_deleted": post.is_deleted,
            "deleted_at": post.deleted_at,
            "deleted_by_id": post.deleted_by_id,
            "created_at": post.created_at,
            "updated_at": post.updated_at,
            "author": author_summary(post.author),
            "tags": repo.get_tags_for_posts(ids).get(post.id, []),
            "images": list(post.images),
            "counts": {
                "reports": repo.get_report_counts(ids).get(post.id, 0),
                "likes": repo.get_like_counts(ids).get(post.id, 0),
                "saves": repo.get_save_counts(ids).get(post.id, 0),
                "comments": repo.get_comment_counts(ids).get(post.id, 0),
            },
        }
