"""
Router for the staff moderation queues: reports and verification requests.
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
from services.report_service import ReportService
from services.verification_service import VerificationService

router = APIRouter(prefix="/admin", tags=["admin-moderation"])


# ============================================================================
# Reports
# ============================================================================


@router.get("/reports", response_model=schemas.ReportList)
def list_reports(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    q: Optional[str] = Query(None, max_length=200),
    status: Optional[db_models.ReportStatus] = None,
    reason: Optional[db_models.ReportReason] = None,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Get the report queue, newest first.

    ``q`` matches the reporter's name or any id involved in the report.
    """
    return ReportService.list_reports(
        db=db, page=page, limit=limit, search=q, status=status, reason=reason
    )


@router.patch("/reports/{report_id}", response_model=schemas.ReportOut)
def update_report_status(
    report_id: uuid.UUID,
    body: schemas.ReportStatusUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> db_models.Report:
    """
    Move a report through its lifecycle.

    Resolving or rejecting records the caller and the note.

    Domain exceptions are caught by centralized exception handlers.
    """
    user_id: uuid.UUID = current_user.id
    return ReportService.update_status(
        db=db,
        report_id=report_id,
        actor_id=user_id,
        status=body.status,
        resolution_note=body.resolution_note,
    )


# ============================================================================
# Verification requests
# ============================================================================


@router.get("/verification", response_model=schemas.VerificationRequestList)
def list_verification_requests(
    page: PageNumber = 1,
    limit: PageLimit = 20,
    status: Optional[db_models.VerificationStatus] = None,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """Verification review queue, oldest first."""
    return VerificationService.list_requests(db, page, limit, status)


@router.patch("/verification/{request_id}", response_model=schemas.OkResponse)
def review_verification_request(
    request_id: uuid.UUID,
    body: schemas.VerificationReview,
    db: Session = Depends(get_db),
    current_user: db_models.Profile = Depends(auth.get_staff_user),
) -> dict:
    """
    Approve or reject a pending request.

    Approval marks the requester as a verified developer.
    """
    user_id: uuid.UUID = current_user.id
    VerificationService.review_request(
        db=db,
        request_id=request_id,
        reviewer_id=user_id,
        status=body.status,
        note=body.note,
    )
    return {"ok": True}
