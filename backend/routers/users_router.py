"""
Public user profile endpoints.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models.schemas as schemas
from helpers.pagination import PageLimit, PageNumber
from repositories.database import get_db
from services.post_service import PostService
from services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=schemas.PublicUserProfile)
def get_user(user_id: uuid.UUID, db: Session = Depends(get_db)) -> dict:
    """
    Public profile with post, like and save totals over visible posts.
    Public endpoint - no authentication required.

    Domain exceptions are caught by centralized exception handlers.
    """
    return ProfileService.get_public_profile(db, user_id)


@router.get("/{user_id}/posts", response_model=schemas.PostList)
def get_user_posts(
    user_id: uuid.UUID,
    page: PageNumber = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
) -> dict:
    """Visible posts of a user, newest first."""
    ProfileService.ensure_exists(db, user_id)
    return PostService.list_author_posts(db=db, author_id=user_id, page=page, limit=limit)
