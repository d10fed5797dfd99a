"""Router for developer verification requests."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import limiter
from models.config import settings
from repositories.database import get_db
from services.verification_service import VerificationService

router = APIRouter(prefix="/verify", tags=["verification"])


@router.post("/request", response_model=schemas.VerificationCreated)
@limiter.limit(settings.VERIFICATION_RATE_LIMIT)
def submit_verification_request(
    request: Request,
    request_data: schemas.VerificationRequestCreate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """
    Ask for the verified developer badge.

    One pending request at a time; approved users cannot ask again.

    Domain exceptions are caught by centralized exception handlers.
    """
    created = VerificationService.submit_request(
        db=db,
        user_id=current_user.id,
        proof_message=request_data.proof_message,
        play_store_developer_url=request_data.play_store_developer_url,
    )
    return {"ok": True, "request_id": created.id}


@router.get("/me", response_model=schemas.VerificationMe)
def get_my_verification(
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_current_user),
) -> dict:
    """State of the caller's latest verification request."""
    return VerificationService.get_my_status(db, current_user)
