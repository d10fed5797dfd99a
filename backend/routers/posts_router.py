"""
Router for posts: public feed, detail, author mutations and reactions.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageNumber
from repositories.database import get_db
from services.post_service import PostService
from services.reaction_service import ReactionService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=schemas.FeedResponse)
def get_feed(
    page: PageNumber = 1,
    q: Optional[str] = Query(None, max_length=200, description="Search text"),
    tag: Optional[str] = Query(None, max_length=64, description="Tag slug or name"),
    verified: bool = Query(False, description="Only verified developers"),
    sort: schemas.FeedSort = schemas.FeedSort.NEWEST,
    db: Session = Depends(get_db),
) -> dict:
    """
    Public feed of visible posts.

    Soft-deleted and hidden posts never appear. Public endpoint.
    """
    return PostService.get_feed(
        db=db,
        page=page,
        search=q,
        tag=tag,
        verified_only=verified,
        sort=sort,
    )


@router.post(
    "", response_model=schemas.PostCreated, status_code=status.HTTP_201_CREATED
)
def create_post(
    post_data: schemas.PostCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Create a testing request.

    Tags are matched by slug and created when unknown.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    post = PostService.create_post(db=db, author_id=user_id, data=post_data)
    return {"ok": True, "post_id": post.id}


@router.get("/{post_id}", response_model=schemas.PostDetail)
def get_post(
    post_id: uuid.UUID,
    viewer_id: Optional[uuid.UUID] = Query(None, alias="viewerId"),
    db: Session = Depends(get_db),
    current_user: Optional[db_models.Profile] = Depends(
        auth.get_current_user_optional
    ),
) -> dict:
    """
    Get a visible post with tags, images and counts.

    ``likedByMe``/``savedByMe`` are filled for the signed-in caller, or for
    ``viewerId`` on anonymous requests.
    """
    viewer = current_user.id if current_user is not None else viewer_id
    return PostService.get_post_detail(db=db, post_id=post_id, viewer_id=viewer)


@router.put("/{post_id}", response_model=schemas.OkResponse)
def update_post(
    post_id: uuid.UUID,
    post_data: schemas.PostUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Update your own post.

    Only the author can edit. ``tags`` and ``images`` replace the whole set
    when present.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    PostService.update_post(db=db, post_id=post_id, actor_id=user_id, data=post_data)
    return {"ok": True}


@router.delete("/{post_id}", response_model=schemas.OkResponse)
def delete_post(
    post_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Soft delete your own post.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    PostService.delete_own_post(db=db, post_id=post_id, actor_id=user_id)
    return {"ok": True}


@router.post("/{post_id}/like", response_model=schemas.LikeToggleResponse)
def toggle_like(
    post_id: uuid.UUID,
    body: Optional[schemas.ReactionRequest] = Body(None),
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Like or unlike a post.

    A ``userId`` in the body must match the session.
    """
    user_id: uuid.UUID = current_user.id
    return ReactionService.toggle_like(
        db=db,
        post_id=post_id,
        actor_id=user_id,
        claimed_user_id=body.user_id if body else None,
    )


@router.post("/{post_id}/save", response_model=schemas.SaveToggleResponse)
def toggle_save(
    post_id: uuid.UUID,
    body: Optional[schemas.ReactionRequest] = Body(None),
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """Bookmark or un-bookmark a post."""
    user_id: uuid.UUID = current_user.id
    return ReactionService.toggle_save(
        db=db,
        post_id=post_id,
        actor_id=user_id,
        claimed_user_id=body.user_id if body else None,
    )
