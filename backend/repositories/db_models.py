"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Primary keys are UUIDs. Profile ids are the subject ids issued by the
identity provider, every other id is generated here.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class Role(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ModerationStatus(str, enum.Enum):
    OK = "ok"
    NEEDS_FIX = "needs_fix"
    HIDDEN = "hidden"


# Content Moderation Enums


class ReportTargetType(str, enum.Enum):
    """Kind of entity a report points at."""

    POST = "post"
    COMMENT = "comment"
    USER = "user"


class ReportReason(str, enum.Enum):
    """Reasons for reporting content or users."""

    SPAM = "spam"
    MALWARE = "malware"
    HATE = "hate"
    HARASSMENT = "harassment"
    COPYRIGHT = "copyright"
    OTHER = "other"


class ReportStatus(str, enum.Enum):
    """Status of a report. RESOLVED and REJECTED are terminal."""

    OPEN = "open"
    REVIEWING = "reviewing"
    RESOLVED = "resolved"
    REJECTED = "rejected"


TERMINAL_REPORT_STATUSES = frozenset({ReportStatus.RESOLVED, ReportStatus.REJECTED})


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def _enum_type(enum_cls: type[enum.Enum]) -> Enum:
    """Persist enum values (lowercase) rather than member names."""
    return Enum(
        enum_cls,
        name=enum_cls.__name__.lower(),
        values_callable=lambda members: [m.value for m in members],
    )


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (Index("ix_profiles_role", "role"),)

    # Same id as the identity provider's user
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[Role] = mapped_column(
        _enum_type(Role), default=Role.USER, nullable=False
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    verified_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.MODERATOR, Role.ADMIN)


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_author", "author_id"),
        Index("ix_posts_visibility", "is_deleted", "moderation_status"),
        Index("ix_posts_created", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(160), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    play_store_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    google_group_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    moderation_status: Mapped[ModerationStatus] = mapped_column(
        _enum_type(ModerationStatus), default=ModerationStatus.OK, nullable=False
    )

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    deleted_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    # Relationships
    author: Mapped["Profile"] = relationship("Profile", foreign_keys=[author_id])
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary="post_tags", viewonly=True, order_by="Tag.name"
    )
    images: Mapped[List["PostImage"]] = relationship(
        "PostImage",
        order_by="PostImage.position",
        cascade="all, delete-orphan",
        back_populates="post",
    )

    @property
    def is_visible(self) -> bool:
        """Visible to the public: not soft-deleted and not hidden."""
        return not self.is_deleted and self.moderation_status != ModerationStatus.HIDDEN


class PostImage(Base):
    __tablename__ = "post_images"
    __table_args__ = (Index("ix_post_images_post", "post_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    post: Mapped["Post"] = relationship("Post", back_populates="images")


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_post_created", "post_id", "created_at"),
        Index("ix_comments_author", "author_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    deleted_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    author: Mapped["Profile"] = relationship("Profile", foreign_keys=[author_id])
    post: Mapped["Post"] = relationship("Post")


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(48), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )


class PostTag(Base):
    __tablename__ = "post_tags"
    __table_args__ = (Index("ix_post_tags_tag", "tag_id"),)

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    # No cascade: a tag cannot be removed while posts reference it
    tag_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tags.id"), primary_key=True
    )


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (Index("ix_post_likes_user", "user_id"),)

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )


class PostSave(Base):
    __tablename__ = "post_saves"
    __table_args__ = (Index("ix_post_saves_user", "user_id"),)

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )


class Report(Base):
    """A report against exactly one post, comment or user."""

    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_reports_status_created", "status", "created_at"),
        Index("ix_reports_post", "post_id"),
        Index("ix_reports_comment", "comment_id"),
        Index("ix_reports_target_user", "target_user_id"),
        Index("ix_reports_reporter", "reporter_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    target_type: Mapped[ReportTargetType] = mapped_column(
        _enum_type(ReportTargetType), nullable=False
    )
    post_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    target_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True
    )
    reason: Mapped[ReportReason] = mapped_column(
        _enum_type(ReportReason), nullable=False
    )
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        _enum_type(ReportStatus), default=ReportStatus.OPEN, nullable=False
    )

    # Set only for terminal statuses
    resolved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )
    resolution_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    reporter: Mapped["Profile"] = relationship("Profile", foreign_keys=[reporter_id])
    post: Mapped[Optional["Post"]] = relationship("Post", foreign_keys=[post_id])
    comment: Mapped[Optional["Comment"]] = relationship(
        "Comment", foreign_keys=[comment_id]
    )
    target_user: Mapped[Optional["Profile"]] = relationship(
        "Profile", foreign_keys=[target_user_id]
    )

    @property
    def target_id(self) -> Optional[uuid.UUID]:
        if self.target_type == ReportTargetType.POST:
            return self.post_id
        if self.target_type == ReportTargetType.COMMENT:
            return self.comment_id
        return self.target_user_id


class VerificationRequest(Base):
    __tablename__ = "verification_requests"
    __table_args__ = (
        Index("ix_verification_requests_user_created", "user_id", "created_at"),
        Index("ix_verification_requests_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    play_store_developer_url: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True
    )
    proof_message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[VerificationStatus] = mapped_column(
        _enum_type(VerificationStatus),
        default=VerificationStatus.PENDING,
        nullable=False,
    )
    reviewed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )
    review_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )

    user: Mapped["Profile"] = relationship("Profile", foreign_keys=[user_id])
