"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .comment_service import CommentService
from .moderation_service import ModerationService
from .post_service import PostService
from .profile_service import ProfileService
from .reaction_service import ReactionService
from .report_service import ReportService
from .tag_service import TagService
from .verification_service import VerificationService

__all__ = [
    "CommentService",
    "ModerationService",
    "PostService",
    "ProfileService",
    "ReactionService",
    "ReportService",
    "TagService",
    "VerificationService",
]
