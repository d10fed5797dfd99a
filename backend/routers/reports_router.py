"""Router for submitting reports against posts, comments or users."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import limiter
from models.config import settings
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=schemas.OkResponse)
@limiter.limit(settings.REPORTS_RATE_LIMIT)
def create_report(
    request: Request,
    report_data: schemas.ReportCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Report a post, comment or user to the moderators.

    Only the id matching ``targetType`` is kept. Rate limited per IP.

    Args:
        request: FastAPI request object (required for rate limiter)
        report_data: Target, reason and optional message

    Domain exceptions are caught by centralized exception handlers.
    """
    ReportService.create_report(db=db, reporter_id=current_user.id, data=report_data)
    return {"ok": True}
