"""
Templates router for the post editor starter bodies.
"""

from typing import List

from fastapi import APIRouter

import models.schemas as schemas
from models.post_templates import POST_TEMPLATES

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[schemas.PostTemplate])
def list_templates() -> list:
    """
    Built-in post templates, in display order.
    Public endpoint - no authentication required.
    """
    return POST_TEMPLATES
