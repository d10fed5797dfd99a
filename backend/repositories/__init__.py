"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .comment_repository import CommentRepository
from .post_repository import PostRepository
from .profile_repository import ProfileRepository
from .reaction_repository import ReactionRepository
from .report_repository import ReportRepository
from .tag_repository import TagRepository
from .verification_repository import VerificationRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "PostRepository",
    "ProfileRepository",
    "ReactionRepository",
    "ReportRepository",
    "TagRepository",
    "VerificationRepository",
]
