"""
Router for staff administration of posts, users and tags.

Every endpoint is open to moderators and admins. Role changes are further
restricted to admins inside ProfileService.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageLimit, PageNumber
from repositories.database import get_db
from services.moderation_service import ModerationService
from services.profile_service import ProfileService
from services.tag_service import TagService

router = APIRouter(prefix="/admin", tags=["admin"])


# ============================================================================
# Posts
# ============================================================================


@router.get("/posts", response_model=schemas.AdminPostList)
def list_posts(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    q: Optional[str] = Query(None, max_length=200),
    status: schemas.AdminPostFilter = schemas.AdminPostFilter.ALL,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    List posts for moderation.

    ``status=deleted`` lists soft-deleted posts; other values list live posts.
    """
    return ModerationService.list_posts(
        db=db, page=page, limit=limit, search=q, status=status
    )


@router.get("/posts/{post_id}", response_model=schemas.AdminPostDetail)
def get_post(
    post_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """Full post detail, including hidden and soft-deleted posts."""
    return ModerationService.get_post_detail(db, post_id)


@router.patch("/posts/{post_id}", response_model=schemas.ModerationActionResponse)
def moderate_post(
    post_id: uuid.UUID,
    body: schemas.ModerationActionRequest,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Apply a moderation action to a post.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    post = ModerationService.apply_action(
        db=db, post_id=post_id, actor_id=user_id, action=body.action
    )
    return {
        "ok": True,
        "id": post.id,
        "moderation_status": post.moderation_status,
        "is_deleted": post.is_deleted,
    }


# ============================================================================
# Users
# ============================================================================


@router.get("/users", response_model=schemas.AdminUserList)
def list_users(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    q: Optional[str] = Query(None, max_length=200),
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """Users with post counts and reports received."""
    return ProfileService.list_users(db=db, page=page, limit=limit, search=q)


@router.get("/users/{user_id}", response_model=schemas.AdminUserDetail)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    return ProfileService.get_user_detail(db, user_id)


@router.patch("/users/{user_id}", response_model=schemas.OkResponse)
def update_user(
    user_id: uuid.UUID,
    user_data: schemas.AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Rename a user, toggle the verified badge or change the role.

    Only admins can change roles.

    Domain exceptions are caught by centralized exception handlers.
    """
    ProfileService.update_user(db=db, user_id=user_id, actor=current_user, data=user_data)
    return {"ok": True}


# ============================================================================
# Tags
# ============================================================================


@router.get("/tags", response_model=schemas.AdminTagList)
def list_tags(
    page: PageNumber = 1,
    limit: PageLimit = 50,
    q: Optional[str] = Query(None, max_length=64),
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """Tags ordered by slug with the number of live posts using each."""
    return TagService.list_admin_tags(db, q, page, limit)


@router.post("/tags", response_model=schemas.TagMutationResponse)
def create_tag(
    tag_data: schemas.TagCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Create a tag. The slug is derived from the name when left blank.

    Domain exceptions are caught by centralized exception handlers.
    """
    tag = TagService.create_tag(db, tag_data.name, tag_data.slug)
    return {"ok": True, "tag": tag}


@router.patch("/tags/{tag_id}", response_model=schemas.TagMutationResponse)
def update_tag(
    tag_id: uuid.UUID,
    tag_data: schemas.TagUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """Rename and/or re-slug a tag."""
    tag = TagService.update_tag(db, tag_id, name=tag_data.name, slug=tag_data.slug)
    return {"ok": True, "tag": tag}


@router.delete("/tags/{tag_id}", response_model=schemas.OkResponse)
def delete_tag(
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Delete a tag no post references.

    Domain exceptions are caught by centralized exception handlers.
    """
    TagService.delete_tag(db, tag_id)
    return {"ok": True}
