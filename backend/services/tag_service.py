"""
Tag service for business logic.

Tags are looked up fresh on every call; admin edits must be visible
immediately to every worker.
"""

import uuid
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.pagination import has_more, page_offset
from helpers.sanitization import sanitize_plain_text
from helpers.slug import slugify
from models.exceptions import (
    DuplicateSlugException,
    NothingToUpdateException,
    TagInUseException,
    TagNotFoundException,
    ValidationException,
)
from repositories.tag_repository import TagRepository

TAG_NAME_MAX_LENGTH = 48


def _clean_name(raw: Optional[str]) -> str:
    """Sanitized, trimmed tag name. Raises ValidationException when invalid."""
    name = sanitize_plain_text(raw) or ""
    if not name:
        raise ValidationException("Name is required")
    if len(name) > TAG_NAME_MAX_LENGTH:
        raise ValidationException(f"Name too long (max {TAG_NAME_MAX_LENGTH})")
    return name


def _derive_slug(slug: Optional[str], name: Optional[str]) -> str:
    """Slug from the explicit value, or from the name when blank."""
    derived = slugify((slug or "").strip() or (name or ""))
    if not derived:
        raise ValidationException("Invalid slug")
    return derived


class TagService:
    """Service for tag-related business logic."""

    @staticmethod
    def search_tags(
        db: Session, query: Optional[str] = None, limit: int = 50
    ) -> list[db_models.Tag]:
        """Public tag list for pickers, ordered by name."""
        return TagRepository(db).search_tags(query, limit)

    @staticmethod
    def get_or_create_tag(db: Session, name: Optional[str]) -> db_models.Tag:
        """
        Get the tag whose slug matches ``name``, creating it if needed.

        Any signed-in user may do this from the post form.

        Raises:
            ValidationException: If the name is empty, too long or has no
                usable characters for a slug
        """
        clean = _clean_name(name)
        slug = _derive_slug(None, clean)
        repo = TagRepository(db)
        tag = repo.get_or_add(clean, slug)
        repo.commit()
        repo.refresh(tag)
        return tag

    @staticmethod
    def resolve_tags_for_post(db: Session, names: list[str]) -> list[db_models.Tag]:
        """
        Turn the free-text tags of a post form into Tag rows.

        Blank entries are ignored and entries sharing a slug collapse into
        one. New tags are staged in the current transaction, the caller
        commits together with the post.
        """
        repo = TagRepository(db)
        resolved: dict[str, db_models.Tag] = {}
        for raw in names:
            if not (raw or "").strip():
                continue
            clean = _clean_name(raw)
            slug = slugify(clean)
            if not slug or slug in resolved:
                continue
            resolved[slug] = repo.get_or_add(clean, slug)
        return list(resolved.values())

    @staticmethod
    def list_admin_tags(
        db: Session, query: Optional[str], page: int, limit: int
    ) -> dict[str, Any]:
        """
        Admin tag listing with the number of non-deleted posts per tag.

        Returns:
            Dict shaped like schemas.AdminTagList
        """
        repo = TagRepository(db)
        tags, total = repo.search_admin(query, page_offset(page, limit), limit)
        counts = repo.get_post_counts([tag.id for tag in tags])
        items = [
            {
                "id": tag.id,
                "name": tag.name,
                "slug": tag.slug,
                "created_at": tag.created_at,
                "posts_count": counts.get(tag.id, 0),
            }
            for tag in tags
        ]
        return {
            "items": items,
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def create_tag(
        db: Session, name: Optional[str], slug: Optional[str] = None
    ) -> db_models.Tag:
        """
        Create a tag (moderator/admin).

        Args:
            db: Database session
            name: Display name, required, at most 48 characters
            slug: Optional explicit slug, derived from the name when blank

        Returns:
            Created tag

        Raises:
            ValidationException: Invalid name or empty derived slug
            DuplicateSlugException: Slug already used by another tag
        """
        clean = _clean_name(name)
        derived = _derive_slug(slug, clean)

        repo = TagRepository(db)
        if repo.slug_taken(derived):
            raise DuplicateSlugException()

        tag = repo.create(db_models.Tag(name=clean, slug=derived))
        logger.info(f"Tag created: {tag.slug} ({tag.id})")
        return tag

    @staticmethod
    def update_tag(
        db: Session,
        tag_id: uuid.UUID,
        name: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> db_models.Tag:
        """
        Rename and/or re-slug a tag.

        ``None`` means "leave unchanged". A supplied but blank slug is
        re-derived from the new name (or from an empty string, which fails).

        Raises:
            ValidationException: Invalid name or slug
            NothingToUpdateException: Neither field supplied
            TagNotFoundException: Tag does not exist
            DuplicateSlugException: Slug belongs to another tag
        """
        new_name = _clean_name(name) if name is not None else None
        new_slug = _derive_slug(slug, new_name) if slug is not None else None

        if new_name is None and new_slug is None:
            raise NothingToUpdateException()

        repo = TagRepository(db)
        tag = repo.get_by_id(tag_id)
        if tag is None:
            raise TagNotFoundException()

        if new_slug is not None and repo.slug_taken(new_slug, exclude_id=tag.id):
            raise DuplicateSlugException()

        if new_name is not None:
            tag.name = new_name
        if new_slug is not None:
            tag.slug = new_slug
        repo.update(tag)
        logger.info(f"Tag updated: {tag.slug} ({tag.id})")
        return tag

    @staticmethod
    def delete_tag(db: Session, tag_id: uuid.UUID) -> None:
        """
        Delete a tag that no post references.

        Raises:
            TagInUseException: Tag still linked to at least one post
            TagNotFoundException: Tag does not exist
        """
        repo = TagRepository(db)
        used = repo.count_posts(tag_id)
        if used > 0:
            raise TagInUseException(used)

        tag = repo.get_by_id(tag_id)
        if tag is None:
            raise TagNotFoundException()

        repo.delete(tag)
        logger.info(f"Tag deleted: {tag_id}")
