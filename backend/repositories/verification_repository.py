"""
Verification request repository for database operations.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from repositories.base import BaseRepository
from repositories.db_models import VerificationRequest, VerificationStatus


class VerificationRepository(BaseRepository[VerificationRequest]):
    """Repository for VerificationRequest entity operations."""

    def __init__(self, db: Session):
        super().__init__(VerificationRequest, db)

    def get_pending_for_user(self, user_id: uuid.UUID) -> Optional[VerificationRequest]:
        return (
            self.db.query(VerificationRequest)
            .filter(
                VerificationRequest.user_id == user_id,
                VerificationRequest.status == VerificationStatus.PENDING,
            )
            .first()
        )

    def get_latest_for_user(self, user_id: uuid.UUID) -> Optional[VerificationRequest]:
        """Most recently submitted request of the user, if any."""
        return (
            self.db.query(VerificationRequest)
            .filter(VerificationRequest.user_id == user_id)
            .order_by(VerificationRequest.created_at.desc())
            .first()
        )

    def get_filtered(
        self,
        status: Optional[VerificationStatus] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[VerificationRequest], int]:
        """Review queue, oldest first so requests are handled in order."""
        q = self.db.query(VerificationRequest)
        if status is not None:
            q = q.filter(VerificationRequest.status == status)
        total = q.count()
        requests = (
            q.options(joinedload(VerificationRequest.user))
            .order_by(VerificationRequest.created_at.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return requests, total
