"""
Comment service for business logic.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from authentication.auth import ensure_owner
from helpers.pagination import has_more, page_offset
from helpers.sanitization import sanitize_plain_text
from models.exceptions import (
    CommentNotFoundException,
    PostNotFoundException,
    ValidationException,
)
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from services.post_service import author_summary


def _serialize(comment: db_models.Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "content": comment.content,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "author": author_summary(comment.author),
    }


def _clean_content(raw: str) -> str:
    content = sanitize_plain_text(raw) or ""
    if not content:
        raise ValidationException("Comment cannot be empty")
    return content


class CommentService:
    """Service for comment-related business logic."""

    @staticmethod
    def get_comments_for_post(
        db: Session, post_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> dict[str, Any]:
        """
        Get comments for a visible post, newest first.

        Returns:
            Dict shaped like schemas.CommentList

        Raises:
            PostNotFoundException: Missing, soft-deleted or hidden post
        """
        if PostRepository(db).get_visible(post_id) is None:
            raise PostNotFoundException()

        comments, total = CommentRepository(db).get_for_post(
            post_id, page_offset(page, limit), limit
        )
        return {
            "items": [_serialize(c) for c in comments],
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def get_comments_by_author(
        db: Session, author_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> dict[str, Any]:
        comments, total = CommentRepository(db).get_by_author(
            author_id, page_offset(page, limit), limit
        )
        return {
            "items": [_serialize(c) for c in comments],
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def create_comment(
        db: Session, post_id: uuid.UUID, author_id: uuid.UUID, content: str
    ) -> dict[str, Any]:
        """
        Add a comment to a visible post.

        Raises:
            PostNotFoundException: Missing, soft-deleted or hidden post
            ValidationException: Empty content after sanitizing
        """
        if PostRepository(db).get_visible(post_id) is None:
            raise PostNotFoundException()

        comment = CommentRepository(db).create(
            db_models.Comment(
                post_id=post_id,
                author_id=author_id,
                content=_clean_content(content),
            )
        )
        return _serialize(comment)

    @staticmethod
    def _get_own_comment(
        repo: CommentRepository,
        post_id: uuid.UUID,
        comment_id: uuid.UUID,
        actor_id: uuid.UUID,
    ) -> db_models.Comment:
        comment = repo.get_active(comment_id)
        if comment is None or comment.post_id != post_id:
            raise CommentNotFoundException()
        ensure_owner(comment.author_id, actor_id, "comments")
        return comment

    @staticmethod
    def update_comment(
        db: Session,
        post_id: uuid.UUID,
        comment_id: uuid.UUID,
        actor_id: uuid.UUID,
        content: str,
    ) -> dict[str, Any]:
        """
        Author-only edit.

        Raises:
            CommentNotFoundException: Missing or soft-deleted comment
            NotOwnerException: Caller is not the author
        """
        repo = CommentRepository(db)
        comment = CommentService._get_own_comment(repo, post_id, comment_id, actor_id)
        comment.content = _clean_content(content)
        comment.updated_at = datetime.now(timezone.utc)
        repo.update(comment)
        return _serialize(comment)

    @staticmethod
    def delete_comment(
        db: Session, post_id: uuid.UUID, comment_id: uuid.UUID, actor_id: uuid.UUID
    ) -> None:
        """
        Author-only soft delete.

        Raises:
            CommentNotFoundException: Missing or already deleted comment
            NotOwnerException: Caller is not the author
        """
        repo = CommentRepository(db)
        comment = CommentService._get_own_comment(repo, post_id, comment_id, actor_id)
        now = datetime.now(timezone.utc)
        comment.is_deleted = True
        comment.deleted_at = now
        comment.deleted_by_id = actor_id
        comment.updated_at = now
        repo.commit()
        logger.info(f"Comment {comment_id} deleted by its author")
