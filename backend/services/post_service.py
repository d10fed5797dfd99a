"""
Service for post authoring and public post reads.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import ensure_owner
from helpers.pagination import has_more, page_count, page_offset
from helpers.sanitization import sanitize_http_url, sanitize_plain_text
from helpers.slug import slugify
from models.config import settings
from models.exceptions import PostNotFoundException, ValidationException
from repositories.post_repository import PostRepository
from repositories.reaction_repository import like_repository, save_repository
from services.tag_service import TagService

_SORT_KEYS = {
    schemas.FeedSort.MOST_LIKED: "likes",
    schemas.FeedSort.MOST_SAVED: "saves",
    schemas.FeedSort.MOST_COMMENTED: "comments",
}


def author_summary(profile: db_models.Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "avatar_url": profile.avatar_url,
        "is_verified": profile.is_verified,
    }


def _clean_images(urls: list[str]) -> list[str]:
    """Keep only http(s) screenshot URLs, dropping blanks and duplicates."""
    cleaned: list[str] = []
    for raw in urls:
        if not (raw or "").strip():
            continue
        url = sanitize_http_url(raw)
        if url is None:
            raise ValidationException("Images must be http(s) URLs")
        if url not in cleaned:
            cleaned.append(url)
    if len(cleaned) > settings.MAX_IMAGES_PER_POST:
        raise ValidationException(
            f"At most {settings.MAX_IMAGES_PER_POST} images per post"
        )
    return cleaned


def _clean_title(raw: str) -> str:
    title = sanitize_plain_text(raw) or ""
    if not title:
        raise ValidationException("Title is required")
    return title


def _clean_content(raw: str) -> str:
    content = sanitize_plain_text(raw) or ""
    if not content:
        raise ValidationException("Content is required")
    return content


class PostService:
    """Service for post business logic."""

    @staticmethod
    def build_summaries(
        db: Session, posts: list[db_models.Post]
    ) -> list[dict[str, Any]]:
        """
        Attach author, tags and fresh counts to a page of posts.

        Counts are computed from the like/save/comment rows on each call.

        Returns:
            Dicts shaped like schemas.PostSummary
        """
        repo = PostRepository(db)
        ids = [post.id for post in posts]
        likes = repo.get_like_counts(ids)
        saves = repo.get_save_counts(ids)
        comments = repo.get_comment_counts(ids)
        tags = repo.get_tags_for_posts(ids)

        return [
            {
                "id": post.id,
                "title": post.title,
                "content": post.content,
                "play_store_url": post.play_store_url,
                "google_group_url": post.google_group_url,
                "moderation_status": post.moderation_status,
                "created_at": post.created_at,
                "updated_at": post.updated_at,
                "author": author_summary(post.author),
                "tags": tags.get(post.id, []),
                "likes_count": likes.get(post.id, 0),
                "saves_count": saves.get(post.id, 0),
                "comments_count": comments.get(post.id, 0),
            }
            for post in posts
        ]

    @staticmethod
    def paginated(
        db: Session, posts: list[db_models.Post], total: int, page: int, limit: int
    ) -> dict[str, Any]:
        """Wrap a page of posts as schemas.PostList."""
        return {
            "items": PostService.build_summaries(db, posts),
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def get_feed(
        db: Session,
        page: int = 1,
        search: Optional[str] = None,
        tag: Optional[str] = None,
        verified_only: bool = False,
        sort: schemas.FeedSort = schemas.FeedSort.NEWEST,
    ) -> dict[str, Any]:
        """
        Public feed of visible posts.

        Args:
            db: Database session
            page: 1-based page number, FEED_PAGE_SIZE posts per page
            search: Substring matched against title and content
            tag: Tag slug or tag name
            verified_only: Only posts of verified authors
            sort: Ordering, newest first as tiebreaker

        Returns:
            Dict shaped like schemas.FeedResponse
        """
        page_size = settings.FEED_PAGE_SIZE
        tag_text = (tag or "").strip()
        posts, total = PostRepository(db).get_feed(
            search=search,
            tag_slug=slugify(tag_text) or None,
            tag_name=tag_text or None,
            verified_only=verified_only,
            sort=_SORT_KEYS.get(sort),
            skip=page_offset(page, page_size),
            limit=page_size,
        )
        return {
            "ok": True,
            "page": page,
            "page_size": page_size,
            "total": total,
            "page_count": page_count(total, page_size),
            "posts": PostService.build_summaries(db, posts),
        }

    @staticmethod
    def get_post_detail(
        db: Session, post_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None
    ) -> dict[str, Any]:
        """
        Visible post with tags, images, counts and the viewer's reactions.

        Raises:
            PostNotFoundException: Missing, soft-deleted or hidden post
        """
        post = PostRepository(db).get_visible(post_id)
        if post is None:
            raise PostNotFoundException()

        detail = PostService.build_summaries(db, [post])[0]
        detail["images"] = list(post.images)
        if viewer_id is not None:
            detail["liked_by_me"] = like_repository(db).exists(post.id, viewer_id)
            detail["saved_by_me"] = save_repository(db).exists(post.id, viewer_id)
        return detail

    @staticmethod
    def create_post(
        db: Session, author_id: uuid.UUID, data: schemas.PostCreate
    ) -> db_models.Post:
        """
        Create a post with its tags and screenshots in one transaction.

        Unknown tags are created on the fly (matched by slug).

        Raises:
            ValidationException: Empty title/content after sanitizing, too
                many tags or images, or non-http(s) image URLs
        """
        if len(data.tags) > settings.MAX_TAGS_PER_POST:
            raise ValidationException(
                f"At most {settings.MAX_TAGS_PER_POST} tags per post"
            )
        images = _clean_images(data.images)

        repo = PostRepository(db)
        try:
            post = db_models.Post(
                author_id=author_id,
                title=_clean_title(data.title),
                content=_clean_content(data.content),
                play_store_url=sanitize_http_url(data.play_store_url),
                google_group_url=sanitize_http_url(data.google_group_url),
            )
            post.images = [
                db_models.PostImage(url=url, position=position)
                for position, url in enumerate(images)
            ]
            repo.add(post)
            repo.flush()

            tags = TagService.resolve_tags_for_post(db, data.tags)
            repo.replace_tags(post.id, [tag.id for tag in tags])
            repo.commit()
        except Exception:
            repo.rollback()
            raise

        repo.refresh(post)
        logger.info(f"Post {post.id} created by {author_id} with {len(tags)} tag(s)")
        return post

    @staticmethod
    def update_post(
        db: Session,
        post_id: uuid.UUID,
        actor_id: uuid.UUID,
        data: schemas.PostUpdate,
    ) -> db_models.Post:
        """
        Author-only partial update.

        Fields left out of the payload are unchanged. When ``tags`` or
        ``images`` is supplied the whole set is replaced, in the same
        transaction as the row update. Stored image files are not touched.

        Raises:
            PostNotFoundException: Missing or soft-deleted post
            NotOwnerException: Caller is not the author
            ValidationException: Invalid fields
        """
        repo = PostRepository(db)
        post = repo.get_not_deleted(post_id)
        if post is None:
            raise PostNotFoundException()
        ensure_owner(post.author_id, actor_id, "posts")

        fields = data.model_fields_set
        if data.tags is not None and len(data.tags) > settings.MAX_TAGS_PER_POST:
            raise ValidationException(
                f"At most {settings.MAX_TAGS_PER_POST} tags per post"
            )
        images = _clean_images(data.images) if data.images is not None else None

        try:
            if "title" in fields and data.title is not None:
                post.title = _clean_title(data.title)
            if "content" in fields and data.content is not None:
                post.content = _clean_content(data.content)
            if "play_store_url" in fields:
                post.play_store_url = sanitize_http_url(data.play_store_url)
            if "google_group_url" in fields:
                post.google_group_url = sanitize_http_url(data.google_group_url)
            if images is not None:
                post.images = [
                    db_models.PostImage(url=url, position=position)
                    for position, url in enumerate(images)
                ]
            if data.tags is not None:
                tags = TagService.resolve_tags_for_post(db, data.tags)
                repo.replace_tags(post.id, [tag.id for tag in tags])

            post.updated_at = datetime.now(timezone.utc)
            repo.commit()
        except Exception:
            repo.rollback()
            raise

        repo.refresh(post)
        logger.info(f"Post {post.id} updated by {actor_id}")
        return post

    @staticmethod
    def delete_own_post(db: Session, post_id: uuid.UUID, actor_id: uuid.UUID) -> None:
        """
        Author soft delete.

        Raises:
            PostNotFoundException: Missing or already soft-deleted post
            NotOwnerException: Caller is not the author
        """
        repo = PostRepository(db)
        post = repo.get_not_deleted(post_id)
        if post is None:
            raise PostNotFoundException()
        ensure_owner(post.author_id, actor_id, "posts")

        now = datetime.now(timezone.utc)
        post.is_deleted = True
        post.deleted_at = now
        post.deleted_by_id = actor_id
        post.updated_at = now
        repo.commit()
        logger.info(f"Post {post.id} deleted by its author")

    @staticmethod
    def list_author_posts(
        db: Session,
        author_id: uuid.UUID,
        page: int,
        limit: int,
        include_hidden: bool = False,
    ) -> dict[str, Any]:
        """Posts of one author; hidden ones only for the author's own view."""
        posts, total = PostRepository(db).get_by_author(
            author_id,
            visible_only=not include_hidden,
            skip=page_offset(page, limit),
            limit=limit,
        )
        return PostService.paginated(db, posts, total, page, limit)

    @staticmethod
    def list_liked_posts(
        db: Session, user_id: uuid.UUID, page: int, limit: int
    ) -> dict[str, Any]:
        posts, total = PostRepository(db).get_reacted_by(
            db_models.PostLike, user_id, page_offset(page, limit), limit
        )
        return PostService.paginated(db, posts, total, page, limit)

    @staticmethod
    def list_saved_posts(
        db: Session, user_id: uuid.UUID, page: int, limit: int
    ) -> dict[str, Any]:
        posts, total = PostRepository(db).get_reacted_by(
            db_models.PostSave, user_id, page_offset(page, limit), limit
        )
        return PostService.paginated(db, posts, total, page, limit)
