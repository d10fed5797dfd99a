"""
Service for the report lifecycle: submission by users, triage by staff.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

import models.schemas as schemas
from helpers.pagination import has_more, page_offset
from helpers.sanitization import sanitize_plain_text
from models.exceptions import (
    CommentNotFoundException,
    InvalidStatusException,
    PostNotFoundException,
    ProfileNotFoundException,
    ReportNotFoundException,
    SelfReportException,
    ValidationException,
)
from repositories.db_models import (
    TERMINAL_REPORT_STATUSES,
    Report,
    ReportReason,
    ReportStatus,
    ReportTargetType,
)
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.profile_repository import ProfileRepository
from repositories.report_repository import ReportRepository

# Body field that must carry the target id, per target type
TARGET_FIELDS = {
    ReportTargetType.POST: "post_id",
    ReportTargetType.COMMENT: "comment_id",
    ReportTargetType.USER: "target_user_id",
}

# Lookup and missing-target error per target type
TARGET_LOOKUPS = {
    ReportTargetType.POST: (PostRepository, PostNotFoundException),
    ReportTargetType.COMMENT: (CommentRepository, CommentNotFoundException),
    ReportTargetType.USER: (ProfileRepository, ProfileNotFoundException),
}


def _note_or_none(note: Optional[str]) -> Optional[str]:
    cleaned = (sanitize_plain_text(note) or "").strip()
    return cleaned or None


class ReportService:
    """Service for report business logic."""

    @staticmethod
    def create_report(
        db: Session, reporter_id: uuid.UUID, data: schemas.ReportCreate
    ) -> Report:
        """
        File a report against a post, comment or user.

        Only the id matching ``target_type`` is stored; any other ids in the
        payload are ignored.

        Args:
            db: Database session
            reporter_id: Caller's profile id
            data: Parsed payload (enums and message length already checked)

        Returns:
            Created report with status ``open``

        Raises:
            ValidationException: The matching target id is missing
            SelfReportException: A user reporting themselves
            NotFoundException: The targeted post, comment or user does not exist
        """
        field = TARGET_FIELDS[data.target_type]
        target_id: Optional[uuid.UUID] = getattr(data, field)
        if target_id is None:
            raise ValidationException(f"Missing {to_camel(field)}")

        if data.target_type == ReportTargetType.USER and target_id == reporter_id:
            raise SelfReportException()

        repo_class, missing = TARGET_LOOKUPS[data.target_type]
        if repo_class(db).get_by_id(target_id) is None:
            raise missing()

        report = Report(
            reporter_id=reporter_id,
            target_type=data.target_type,
            reason=data.reason,
            message=_note_or_none(data.message),
            status=ReportStatus.OPEN,
            **{field: target_id},
        )
        report = ReportRepository(db).create(report)
        logger.info(
            f"Report {report.id} filed: {data.target_type.value} {target_id} "
            f"({data.reason.value})"
        )
        return report

    @staticmethod
    def list_reports(
        db: Session,
        page: int,
        limit: int,
        search: Optional[str] = None,
        status: Optional[ReportStatus] = None,
        reason: Optional[ReportReason] = None,
    ) -> dict[str, Any]:
        """
        Moderation queue, newest first.

        Returns:
            Dict shaped like schemas.ReportList
        """
        reports, total = ReportRepository(db).get_filtered(
            search=search,
            status=status,
            reason=reason,
            skip=page_offset(page, limit),
            limit=limit,
        )
        items = [
            {
                "id": r.id,
                "created_at": r.created_at,
                "updated_at": r.updated_at,
                "status": r.status,
                "reason": r.reason,
                "target_type": r.target_type,
                "target_id": r.target_id,
                "message": r.message,
                "resolution_note": r.resolution_note,
                "resolved_by_id": r.resolved_by_id,
                "reporter": {
                    "id": r.reporter_id,
                    "name": r.reporter.name or "Unknown",
                },
                "summary": r.message,
            }
            for r in reports
        ]
        return {
            "items": items,
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": has_more(page, limit, total),
        }

    @staticmethod
    def update_status(
        db: Session,
        report_id: uuid.UUID,
        actor_id: uuid.UUID,
        status: Optional[str],
        resolution_note: Optional[str] = None,
    ) -> Report:
        """
        Move a report to another status.

        Terminal statuses record the resolver and the trimmed note. Any other
        status clears both, even between two non-terminal statuses.

        Raises:
            InvalidStatusException: Status outside the allowed set
            ReportNotFoundException: Report does not exist
        """
        try:
            next_status = ReportStatus((status or "").strip())
        except ValueError:
            raise InvalidStatusException(status)

        repo = ReportRepository(db)
        report = repo.get_by_id(report_id)
        if report is None:
            raise ReportNotFoundException()

        if next_status in TERMINAL_REPORT_STATUSES:
            report.resolved_by_id = actor_id
            report.resolution_note = _note_or_none(resolution_note)
        else:
            report.resolved_by_id = None
            report.resolution_note = None
        report.status = next_status
        report.updated_at = datetime.now(timezone.utc)

        repo.update(report)
        logger.info(f"Report {report.id} moved to {next_status.value} by {actor_id}")
        return report
