"""
Router for the caller's own profile and activity.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageLimit, PageNumber
from repositories.database import get_db
from services.comment_service import CommentService
from services.post_service import PostService

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=schemas.Profile)
def get_me(
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> db_models.Profile:
    """
    Get the signed-in profile.

    The profile is created on first sign-in from the token claims.
    """
    return current_user


@router.get("/posts", response_model=schemas.PostList)
def get_my_posts(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    include_hidden: bool = Query(True, alias="includeHidden"),
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Posts written by the caller.

    Hidden posts are included by default so authors can see what needs fixing.
    """
    return PostService.list_author_posts(
        db=db,
        author_id=current_user.id,
        page=page,
        limit=limit,
        include_hidden=include_hidden,
    )


@router.get("/comments", response_model=schemas.CommentList)
def get_my_comments(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    return CommentService.get_comments_by_author(db, current_user.id, page, limit)


@router.get("/liked", response_model=schemas.PostList)
def get_liked_posts(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """Visible posts the caller liked, most recent like first."""
    return PostService.list_liked_posts(db, current_user.id, page, limit)


@router.get("/saved", response_model=schemas.PostList)
def get_saved_posts(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """Visible posts the caller bookmarked."""
    return PostService.list_saved_posts(db, current_user.id, page, limit)
