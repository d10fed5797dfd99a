"""
Service for developer verification requests.

A user asks for the verified badge by submitting proof that they publish
on Google Play. Staff approve or reject each request; approval marks the
profile as verified.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.pagination import has_more, page_offset
from helpers.sanitization import sanitize_http_url, sanitize_plain_text
from models.exceptions import (
    AlreadyVerifiedException,
    InvalidStatusException,
    ProfileNotFoundException,
    ProofTooShortException,
    VerificationAlreadyReviewedException,
    VerificationPendingException,
    VerificationRequestNotFoundException,
)
from repositories.profile_repository import ProfileRepository
from repositories.verification_repository import VerificationRepository
from services.post_service import author_summary

PROOF_MIN_LENGTH = 20

REVIEW_DECISIONS = frozenset(
    {db_models.VerificationStatus.APPROVED, db_models.VerificationStatus.REJECTED}
)


class VerificationService:
    """Service for verification request business logic."""

    @staticmethod
    def submit_request(
        db: Session,
        user_id: uuid.UUID,
        proof_message: Optional[str],
        play_store_developer_url: Optional[str] = None,
    ) -> db_models.VerificationRequest:
        """
        Submit a verification request.

        Args:
            db: Database session
            user_id: Caller's profile id
            proof_message: Free-text proof, at least 20 characters once trimmed
            play_store_developer_url: Kept only when it is an http(s) URL

        Returns:
            The new pending request

        Raises:
            ProofTooShortException: Proof shorter than 20 characters
            VerificationPendingException: A request is already pending
            AlreadyVerifiedException: Latest request was approved
        """
        proof = (sanitize_plain_text(proof_message) or "").strip()
        if len(proof) < PROOF_MIN_LENGTH:
            raise ProofTooShortException()

        repo = VerificationRepository(db)
        if repo.get_pending_for_user(user_id) is not None:
            raise VerificationPendingException()

        latest = repo.get_latest_for_user(user_id)
        if latest is not None and latest.status == db_models.VerificationStatus.APPROVED:
            raise AlreadyVerifiedException()

        request = repo.create(
            db_models.VerificationRequest(
                user_id=user_id,
                proof_message=proof,
                play_store_developer_url=sanitize_http_url(play_store_developer_url),
                status=db_models.VerificationStatus.PENDING,
            )
        )
        logger.info(f"Verification request {request.id} submitted by {user_id}")
        return request

    @staticmethod
    def get_my_status(db: Session, user: db_models.Profile) -> dict[str, Any]:
        """
        Caller's verification state derived from their latest request.

        Returns:
            Dict shaped like schemas.VerificationMe
        """
        latest = VerificationRepository(db).get_latest_for_user(user.id)

        if latest is None:
            state: dict[str, Any] = {"status": "not_requested"}
        elif latest.status == db_models.VerificationStatus.PENDING:
            state = {"status": "pending", "submitted_at": latest.created_at}
        elif latest.status == db_models.VerificationStatus.APPROVED:
            state = {
                "status": "approved",
                "approved_at": latest.updated_at,
                "note": latest.review_note,
            }
        else:
            state = {
                "status": "rejected",
                "reviewed_at": latest.updated_at,
                "note": latest.review_note,
            }

        return {
            "ok": True,
            "user": {"id": user.id, "role": user.role, "is_verified": user.is_verified},
            "state": state,
        }

    @staticmethod
    def list_requests(
        db: Session,
        page: int,
        limit: int,
        status: Optional[db_models.VerificationStatus] = None,
    ) -> dict[str, Any]:
        """Staff review queue."""
        requests, total = VerificationRepository(db).get_filtered(
            status, page_offset(page, limit), limit
        )
        items = [
            {
                "id": r.id,
                "user": author_summary(r.user),
                "play_store_developer_url": r.play_store_developer_url,
                "proof_message": r.proof_message,
                "status": r.status,
                "reviewed_by_id": r.reviewed_by_id,
                "review_note": r.review_note,
                "created_at": r.created_at,
                "updated_at": r.updated_at,
            }
            for r in requests
        ]
        return {
            "items": items,
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def review_request(
        db: Session,
        request_id: uuid.UUID,
        reviewer_id: uuid.UUID,
        status: Optional[str],
        note: Optional[str] = None,
    ) -> db_models.VerificationRequest:
        """
        Approve or reject a pending request.

        Approval also marks the requester's profile as verified by the
        reviewer.

        Raises:
            InvalidStatusException: Decision is not approved/rejected
            VerificationRequestNotFoundException: Request does not exist
            VerificationAlreadyReviewedException: Request is not pending
        """
        try:
            decision = db_models.VerificationStatus((status or "").strip())
        except ValueError:
            raise InvalidStatusException(status)
        if decision not in REVIEW_DECISIONS:
            raise InvalidStatusException(status)

        repo = VerificationRepository(db)
        request = repo.get_by_id(request_id)
        if request is None:
            raise VerificationRequestNotFoundException()
        if request.status != db_models.VerificationStatus.PENDING:
            raise VerificationAlreadyReviewedException()

        now = datetime.now(timezone.utc)
        request.status = decision
        request.reviewed_by_id = reviewer_id
        request.review_note = (sanitize_plain_text(note) or "").strip() or None
        request.updated_at = now

        if decision == db_models.VerificationStatus.APPROVED:
            profile = ProfileRepository(db).get_by_id(request.user_id)
            if profile is None:
                raise ProfileNotFoundException()
            profile.is_verified = True
            profile.verified_at = now
            profile.verified_by_id = reviewer_id
            profile.updated_at = now

        repo.update(request)
        logger.info(
            f"Verification request {request.id} {decision.value} by {reviewer_id}"
        )
        return request
