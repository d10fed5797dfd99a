"""
Request and response schemas.

JSON payloads use camelCase keys. Request bodies also accept snake_case so
scripts and tests can use either spelling.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from repositories.db_models import (
    ModerationStatus,
    ReportReason,
    ReportStatus,
    ReportTargetType,
    Role,
    VerificationStatus,
)

TITLE_MAX_LENGTH = 160
COMMENT_MAX_LENGTH = 2000
REPORT_MESSAGE_MAX_LENGTH = 2000
PROFILE_NAME_MAX_LENGTH = 120


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


StrippedStr = Annotated[str, BeforeValidator(_strip)]


def _as_text(value: object) -> object:
    if value is None or isinstance(value, str):
        return value
    return str(value)


# Free-form code checked by the service, so 3 reports as an unknown status
# rather than a malformed body
CodeStr = Annotated[Optional[str], BeforeValidator(_as_text)]


# Enums used by routers and services


class FeedSort(str, Enum):
    """Public feed ordering. Newest first breaks ties."""

    NEWEST = "newest"
    MOST_LIKED = "most_liked"
    MOST_SAVED = "most_saved"
    MOST_COMMENTED = "most_commented"


class AdminPostFilter(str, Enum):
    ALL = "all"
    OK = "ok"
    NEEDS_FIX = "needs_fix"
    HIDDEN = "hidden"
    DELETED = "deleted"


class ModerationAction(str, Enum):
    MARK_OK = "mark_ok"
    MARK_NEEDS_FIX = "mark_needs_fix"
    HIDE = "hide"
    SOFT_DELETE = "soft_delete"
    RESTORE = "restore"


# Generic responses


class OkResponse(CamelModel):
    ok: bool = True


# Profiles


class AuthorSummary(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool = False


class Profile(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Role
    is_verified: bool
    verified_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PublicUserStats(CamelModel):
    """Counts over the user's publicly visible posts."""

    posts: int
    likes: int
    saves: int


class PublicUserProfile(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Role
    is_verified: bool
    created_at: datetime
    stats: PublicUserStats


class AdminUserStats(CamelModel):
    posts: int
    comments: int
    reports_made: int
    reports_against: int


class AdminUserListItem(Profile):
    posts_count: int
    reports_count: int


class AdminUserList(CamelModel):
    items: List[AdminUserListItem]
    page: int
    limit: int
    total: int
    has_more: bool


class AdminUserDetail(Profile):
    verified_by_id: Optional[uuid.UUID] = None
    stats: AdminUserStats


class AdminUserUpdate(CamelModel):
    """Partial profile update. Role changes are admin-only."""

    name: Optional[StrippedStr] = None
    is_verified: Optional[bool] = None
    role: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not 1 <= len(v) <= PROFILE_NAME_MAX_LENGTH:
            raise ValueError(
                f"Name must be between 1 and {PROFILE_NAME_MAX_LENGTH} characters"
            )
        return v


# Tags


class TagOut(CamelModel):
    id: uuid.UUID
    name: str
    slug: str


class TagCreated(TagOut):
    created_at: datetime


class AdminTag(TagCreated):
    posts_count: int


class TagList(CamelModel):
    ok: bool = True
    tags: List[TagOut]


class AdminTagList(CamelModel):
    items: List[AdminTag]
    page: int
    limit: int
    total: int
    has_more: bool


class TagCreate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None


class TagUpdate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None


# Posts


class PostImageOut(CamelModel):
    id: uuid.UUID
    url: str
    position: int


class PostCreate(CamelModel):
    title: StrippedStr = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: StrippedStr = Field(..., min_length=1)
    play_store_url: Optional[str] = None
    google_group_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list, max_length=8)
    images: List[str] = Field(default_factory=list, max_length=2)


class PostUpdate(CamelModel):
    """Fields left out are unchanged. ``tags``/``images`` replace the whole set."""

    title: Optional[StrippedStr] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[StrippedStr] = Field(None, min_length=1)
    play_store_url: Optional[str] = None
    google_group_url: Optional[str] = None
    tags: Optional[List[str]] = Field(None, max_length=8)
    images: Optional[List[str]] = Field(None, max_length=2)


class PostCreated(CamelModel):
    ok: bool = True
    post_id: uuid.UUID


class PostSummary(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    play_store_url: Optional[str] = None
    google_group_url: Optional[str] = None
    moderation_status: ModerationStatus
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    tags: List[TagOut]
    likes_count: int
    saves_count: int
    comments_count: int


class FeedResponse(CamelModel):
    ok: bool = True
    page: int
    page_size: int
    total: int
    page_count: int
    posts: List[PostSummary]


class PostDetail(PostSummary):
    images: List[PostImageOut]
    liked_by_me: bool = False
    saved_by_me: bool = False


class PostList(CamelModel):
    items: List[PostSummary]
    page: int
    limit: int
    total: int
    has_more: bool


class PostTemplate(CamelModel):
    """Markdown starter body for the post editor."""

    name: str
    code: str
    category: str
    tone: str
    best_for: List[str]
    highlights: List[str]
    placeholders: List[str]
    image: str
    content: str


# Admin posts


class ModerationActionRequest(CamelModel):
    action: CodeStr = None


class ModerationActionResponse(CamelModel):
    ok: bool = True
    id: uuid.UUID
    moderation_status: ModerationStatus
    is_deleted: bool


class AdminPostListItem(CamelModel):
    id: uuid.UUID
    title: str
    moderation_status: ModerationStatus
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    tags: List[TagOut]
    reports_count: int
    likes_count: int
    comments_count: int


class AdminPostList(CamelModel):
    items: List[AdminPostListItem]
    page: int
    limit: int
    total: int
    has_more: bool


class AdminPostCounts(CamelModel):
    reports: int
    likes: int
    saves: int
    comments: int


class AdminPostDetail(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    play_store_url: Optional[str] = None
    google_group_url: Optional[str] = None
    moderation_status: ModerationStatus
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    tags: List[TagOut]
    images: List[PostImageOut]
    counts: AdminPostCounts


# Likes and saves


class ReactionRequest(CamelModel):
    """Optional body of like/save toggles. ``userId`` must match the session."""

    user_id: Optional[uuid.UUID] = None


class LikeToggleResponse(CamelModel):
    liked: bool
    likes_count: int


class SaveToggleResponse(CamelModel):
    saved: bool
    saves_count: int


# Comments


class CommentCreate(CamelModel):
    content: StrippedStr = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class CommentUpdate(CommentCreate):
    pass


class CommentOut(CamelModel):
    id: uuid.UUID
    post_id: uuid.UUID
    content: str
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary


class CommentList(CamelModel):
    items: List[CommentOut]
    page: int
    limit: int
    total: int
    has_more: bool


# Reports


class ReportCreate(CamelModel):
    target_type: ReportTargetType
    reason: ReportReason
    message: Optional[StrippedStr] = Field(None, max_length=REPORT_MESSAGE_MAX_LENGTH)
    post_id: Optional[uuid.UUID] = None
    comment_id: Optional[uuid.UUID] = None
    target_user_id: Optional[uuid.UUID] = None


class ReportStatusUpdate(CamelModel):
    status: CodeStr = None
    resolution_note: Optional[str] = None


class ReportReporter(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None


class ReportListItem(CamelModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    status: ReportStatus
    reason: ReportReason
    target_type: ReportTargetType
    target_id: Optional[uuid.UUID] = None
    message: Optional[str] = None
    resolution_note: Optional[str] = None
    resolved_by_id: Optional[uuid.UUID] = None
    reporter: ReportReporter
    summary: Optional[str] = None


class ReportList(CamelModel):
    items: List[ReportListItem]
    page: int
    limit: int
    total: int
    has_more: bool


class ReportOut(CamelModel):
    id: uuid.UUID
    status: ReportStatus
    resolved_by_id: Optional[uuid.UUID] = None
    resolution_note: Optional[str] = None
    updated_at: datetime


# Verification


class VerificationRequestCreate(CamelModel):
    proof_message: Optional[str] = None
    play_store_developer_url: Optional[str] = None


class VerificationCreated(CamelModel):
    ok: bool = True
    request_id: uuid.UUID


class VerificationUser(CamelModel):
    id: uuid.UUID
    role: Role
    is_verified: bool


class VerificationState(CamelModel):
    status: Literal["not_requested", "pending", "approved", "rejected"]
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    note: Optional[str] = None


class VerificationMe(CamelModel):
    ok: bool = True
    user: VerificationUser
    state: VerificationState


class VerificationReview(CamelModel):
    status: CodeStr = None
    note: Optional[str] = None


class VerificationRequestOut(CamelModel):
    id: uuid.UUID
    user: AuthorSummary
    play_store_developer_url: Optional[str] = None
    proof_message: str
    status: VerificationStatus
    reviewed_by_id: Optional[uuid.UUID] = None
    review_note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VerificationRequestList(CamelModel):
    items: List[VerificationRequestOut]
    page: int
    limit: int
    total: int
    has_more: bool


class TagMutationResponse(CamelModel):
    ok: bool = True
    tag: TagCreated
