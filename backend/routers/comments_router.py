"""
Router for comments on posts.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageLimit, PageNumber
from repositories.database import get_db
from services.comment_service import CommentService

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])


@router.get("", response_model=schemas.CommentList)
def list_comments(
    post_id: uuid.UUID,
    page: PageNumber = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
) -> dict:
    """
    Comments of a visible post, newest first.
    Public endpoint - no authentication required.
    """
    return CommentService.get_comments_for_post(db, post_id, page, limit)


@router.post("", response_model=schemas.CommentOut)
def create_comment(
    post_id: uuid.UUID,
    comment_data: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Comment on a visible post.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    return CommentService.create_comment(
        db=db, post_id=post_id, author_id=user_id, content=comment_data.content
    )


@router.patch("/{comment_id}", response_model=schemas.CommentOut)
def update_comment(
    post_id: uuid.UUID,
    comment_id: uuid.UUID,
    comment_data: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """Edit your own comment."""
    user_id: uuid.UUID = current_user.id
    return CommentService.update_comment(
        db=db,
        post_id=post_id,
        comment_id=comment_id,
        actor_id=user_id,
        content=comment_data.content,
    )


@router.delete("/{comment_id}", response_model=schemas.OkResponse)
def delete_comment(
    post_id: uuid.UUID,
    comment_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Soft delete your own comment.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    CommentService.delete_comment(
        db=db, post_id=post_id, comment_id=comment_id, actor_id=user_id
    )
    return {"ok": True}
