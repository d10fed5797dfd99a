"""
Service for profiles: the caller's own profile, public profiles and staff
user management.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import has_more, page_offset
from helpers.sanitization import sanitize_plain_text
from models.exceptions import (
    AdminRoleRequiredException,
    InvalidRoleException,
    NothingToUpdateException,
    ProfileNotFoundException,
    ValidationException,
)
from repositories.profile_repository import ProfileRepository


def _profile_fields(profile: db_models.Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "avatar_url": profile.avatar_url,
        "role": profile.role,
        "is_verified": profile.is_verified,
        "verified_at": profile.verified_at,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


class ProfileService:
    """Service for profile business logic."""

    @staticmethod
    def get_public_profile(db: Session, user_id: uuid.UUID) -> dict[str, Any]:
        """
        Public profile with stats over the user's visible posts.

        Raises:
            ProfileNotFoundException: Profile does not exist
        """
        repo = ProfileRepository(db)
        profile = repo.get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundException()

        return {
            "id": profile.id,
            "name": profile.name or "Unknown",
            "avatar_url": profile.avatar_url,
            "role": profile.role,
            "is_verified": profile.is_verified,
            "created_at": profile.created_at,
            "stats": {
                "posts": repo.count_posts(user_id, public_only=True),
                "likes": repo.count_reactions_received(db_models.PostLike, user_id),
                "saves": repo.count_reactions_received(db_models.PostSave, user_id),
            },
        }

    @staticmethod
    def ensure_exists(db: Session, user_id: uuid.UUID) -> db_models.Profile:
        profile = ProfileRepository(db).get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundException()
        return profile

    @staticmethod
    def list_users(
        db: Session, page: int, limit: int, search: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Staff user listing with post counts and reports against each user.

        Returns:
            Dict shaped like schemas.AdminUserList
        """
        repo = ProfileRepository(db)
        profiles, total = repo.search(search, page_offset(page, limit), limit)
        ids = [p.id for p in profiles]
        posts = repo.get_post_counts(ids)
        reports = repo.get_reports_against_counts(ids)

        items = [
            {
                **_profile_fields(p),
                "posts_count": posts.get(p.id, 0),
                "reports_count": reports.get(p.id, 0),
            }
            for p in profiles
        ]
        return {
            "items": items,
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def get_user_detail(db: Session, user_id: uuid.UUID) -> dict[str, Any]:
        """
        Staff view of a user with activity stats.

        Raises:
            ProfileNotFoundException: Profile does not exist
        """
        repo = ProfileRepository(db)
        profile = repo.get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundException()

        return {
            **_profile_fields(profile),
            "verified_by_id": profile.verified_by_id,
            "stats": {
                "posts": repo.count_posts(user_id),
                "comments": repo.count_comments(user_id),
                "reports_made": repo.count_reports_made(user_id),
                "reports_against": repo.count_reports_against(user_id),
            },
        }

    @staticmethod
    def update_user(
        db: Session,
        user_id: uuid.UUID,
        actor: db_models.Profile,
        data: schemas.AdminUserUpdate,
    ) -> db_models.Profile:
        """
        Staff update of a profile.

        Moderators may rename users and toggle the verified badge. Changing
        the role is reserved to admins.

        Raises:
            ValidationException: Name empty after sanitizing
            AdminRoleRequiredException: Non-admin tries to change a role
            InvalidRoleException: Unknown role
            NothingToUpdateException: No field supplied
            ProfileNotFoundException: Profile does not exist
        """
        name: Optional[str] = None
        if data.name is not None:
            name = sanitize_plain_text(data.name) or ""
            if not name:
                raise ValidationException("Invalid name")

        role: Optional[db_models.Role] = None
        if data.role is not None:
            if actor.role != db_models.Role.ADMIN:
                raise AdminRoleRequiredException()
            try:
                role = db_models.Role(data.role.strip())
            except ValueError:
                raise InvalidRoleException()

        if name is None and data.is_verified is None and role is None:
            raise NothingToUpdateException()

        repo = ProfileRepository(db)
        profile = repo.get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundException()

        now = datetime.now(timezone.utc)
        if name is not None:
            profile.name = name
        if data.is_verified is not None:
            profile.is_verified = data.is_verified
            profile.verified_at = now if data.is_verified else None
            profile.verified_by_id = actor.id if data.is_verified else None
        if role is not None:
            if role != profile.role:
                logger.info(
                    f"Role change: {profile.id} {profile.role.value} -> {role.value} "
                    f"by {actor.id}"
                )
            profile.role = role
        profile.updated_at = now

        return repo.update(profile)
