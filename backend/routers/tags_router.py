"""
Tags router for tag-related endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import TagListLimit
from repositories.database import get_db
from services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=schemas.TagList)
def list_tags(
    q: Optional[str] = Query(None, max_length=48, description="Name filter"),
    limit: TagListLimit = 50,
    db: Session = Depends(get_db),
) -> dict:
    """
    Tags ordered by name, for pickers and autocomplete.
    Public endpoint - no authentication required.
    """
    return {"ok": True, "tags": TagService.search_tags(db, q, limit)}


@router.post("", response_model=schemas.TagMutationResponse)
def get_or_create_tag(
    tag_data: schemas.TagCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Get the tag matching ``name`` by slug, creating it when missing.

    Domain exceptions are caught by centralized exception handlers.
    """
    tag = TagService.get_or_create_tag(db, tag_data.name)
    return {"ok": True, "tag": tag}
