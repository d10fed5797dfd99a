"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values):
    return sa.Enum(*values, name=name)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _soft_delete():
    return [
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["deleted_by_id"], ["profiles.id"]),
    ]


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column(
            "role",
            _enum("role", "user", "moderator", "admin"),
            nullable=False,
            server_default="user",
        ),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_by_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["verified_by_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=False)
    op.create_index("ix_profiles_role", "profiles", ["role"], unique=False)

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=160), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("play_store_url", sa.Text(), nullable=True),
        sa.Column("google_group_url", sa.Text(), nullable=True),
        sa.Column(
            "moderation_status",
            _enum("moderationstatus", "ok", "needs_fix", "hidden"),
            nullable=False,
            server_default="ok",
        ),
        *_soft_delete(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_posts_author", "posts", ["author_id"], unique=False)
    op.create_index(
        "ix_posts_visibility", "posts", ["is_deleted", "moderation_status"], unique=False
    )
    op.create_index("ix_posts_created", "posts", ["created_at"], unique=False)

    op.create_table(
        "post_images",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_images_post", "post_images", ["post_id"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_soft_delete(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_comments_post_created", "comments", ["post_id", "created_at"], unique=False
    )
    op.create_index("ix_comments_author", "comments", ["author_id"], unique=False)

    op.create_table(
        "tags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=48), nullable=False),
        sa.Column("slug", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tags_slug", "tags", ["slug"], unique=True)

    op.create_table(
        "post_tags",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("tag_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"]),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )
    op.create_index("ix_post_tags_tag", "post_tags", ["tag_id"], unique=False)

    for table in ("post_likes", "post_saves"):
        op.create_table(
            table,
            sa.Column("post_id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("post_id", "user_id"),
        )
        op.create_index(f"ix_{table}_user", table, ["user_id"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("reporter_id", sa.Uuid(), nullable=False),
        sa.Column(
            "target_type",
            _enum("reporttargettype", "post", "comment", "user"),
            nullable=False,
        ),
        sa.Column("post_id", sa.Uuid(), nullable=True),
        sa.Column("comment_id", sa.Uuid(), nullable=True),
        sa.Column("target_user_id", sa.Uuid(), nullable=True),
        sa.Column(
            "reason",
            _enum(
                "reportreason",
                "spam",
                "malware",
                "hate",
                "harassment",
                "copyright",
                "other",
            ),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "status",
            _enum("reportstatus", "open", "reviewing", "resolved", "rejected"),
            nullable=False,
            server_default="open",
        ),
        sa.Column("resolved_by_id", sa.Uuid(), nullable=True),
        sa.Column("resolution_note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["reporter_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["target_user_id"], ["profiles.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["resolved_by_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_reports_status_created", "reports", ["status", "created_at"], unique=False
    )
    op.create_index("ix_reports_post", "reports", ["post_id"], unique=False)
    op.create_index("ix_reports_comment", "reports", ["comment_id"], unique=False)
    op.create_index(
        "ix_reports_target_user", "reports", ["target_user_id"], unique=False
    )
    op.create_index("ix_reports_reporter", "reports", ["reporter_id"], unique=False)

    op.create_table(
        "verification_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("play_store_developer_url", sa.Text(), nullable=True),
        sa.Column("proof_message", sa.Text(), nullable=False),
        sa.Column(
            "status",
            _enum("verificationstatus", "pending", "approved", "rejected"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("reviewed_by_id", sa.Uuid(), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewed_by_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_verification_requests_user_created",
        "verification_requests",
        ["user_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_verification_requests_status",
        "verification_requests",
        ["status"],
        unique=False,
    )


def downgrade():
    op.drop_table("verification_requests")
    op.drop_table("reports")
    op.drop_table("post_saves")
    op.drop_table("post_likes")
    op.drop_table("post_tags")
    op.drop_table("tags")
    op.drop_table("comments")
    op.drop_table("post_images")
    op.drop_table("posts")
    op.drop_table("profiles")

    # Named enum types only exist on PostgreSQL
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for name in (
            "verificationstatus",
            "reportstatus",
            "reportreason",
            "reporttargettype",
            "moderationstatus",
            "role",
        ):
            sa.Enum(name=name).drop(bind, checkfirst=True)
