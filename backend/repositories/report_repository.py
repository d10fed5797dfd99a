"""
Report repository for database operations.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from repositories.base import BaseRepository, like_pattern, parse_uuid
from repositories.db_models import Profile, Report, ReportReason, ReportStatus


class ReportRepository(BaseRepository[Report]):
    """Repository for Report entity operations."""

    def __init__(self, db: Session):
        super().__init__(Report, db)

    def get_filtered(
        self,
        search: Optional[str] = None,
        status: Optional[ReportStatus] = None,
        reason: Optional[ReportReason] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Report], int]:
        """
        Get reports for the moderation queue, newest first.

        Args:
            search: Matches the reporter name; an exact UUID matches the
                report id or the reported post, comment or user id
            status: Restrict to one status
            reason: Restrict to one reason
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (reports, total matching)
        """
        q = self.db.query(Report).join(Profile, Profile.id == Report.reporter_id)

        if status is not None:
            q = q.filter(Report.status == status)
        if reason is not None:
            q = q.filter(Report.reason == reason)

        if search and search.strip():
            conditions = [func.lower(Profile.name).like(like_pattern(search))]
            as_uuid = parse_uuid(search)
            if as_uuid is not None:
                conditions.extend(
                    [
                        Report.id == as_uuid,
                        Report.post_id == as_uuid,
                        Report.comment_id == as_uuid,
                        Report.target_user_id == as_uuid,
                    ]
                )
            q = q.filter(or_(*conditions))

        total = q.count()
        reports = (
            q.options(joinedload(Report.reporter))
            .order_by(Report.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return reports, total
