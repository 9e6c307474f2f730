"""initial schema

Revision ID: 3b1f6c2a9d40
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b1f6c2a9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _user_fk(column: str, **kwargs: object) -> sa.Column:
    return sa.Column(
        column,
        sa.Integer(),
        sa.ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        **kwargs,
    )


def upgrade() -> None:
    """Create users, posts, social-graph edges, likes, polls and notifications."""
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "follows",
        _user_fk("follower_id", primary_key=True),
        _user_fk("following_id", primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_follows_following_id", "follows", ["following_id"])
    op.create_table(
        "blocks",
        _user_fk("user_id", primary_key=True),
        _user_fk("target_user_id", primary_key=True),
    )
    op.create_table(
        "mutes",
        _user_fk("user_id", primary_key=True),
        _user_fk("target_user_id", primary_key=True),
    )
    op.create_table(
        "user_relationships",
        _user_fk("user_id", primary_key=True),
        _user_fk("target_user_id", primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "posts",
        sa.Column("post_id", sa.Integer(), autoincrement=True, nullable=False),
        _user_fk("user_id"),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("facets", sa.JSON(), nullable=False),
        sa.Column("attributes", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("post_id"),
    )
    op.create_index("ix_posts_user_id_created_at", "posts", ["user_id", "created_at"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])
    op.create_table(
        "images",
        sa.Column("image_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("image_blob_url", sa.Text(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("image_id"),
    )
    op.create_index("ix_images_post_id", "images", ["post_id"])
    op.create_table(
        "pinned_posts",
        _user_fk("user_id", primary_key=True),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("pinned_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "poll_votes",
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _user_fk("user_id", primary_key=True),
        sa.Column("option_index", sa.Integer(), nullable=False),
    )
    op.create_index("ix_poll_votes_post_id", "poll_votes", ["post_id"])

    op.create_table(
        "comments",
        sa.Column("comment_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("user_id"),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("facets", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("comment_id"),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_table(
        "likes",
        sa.Column("like_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "comment_id",
            sa.Integer(),
            sa.ForeignKey("comments.comment_id", ondelete="CASCADE"),
            nullable=True,
        ),
        _user_fk("user_id"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("like_id"),
    )
    op.create_index("ix_likes_post_id_comment_id", "likes", ["post_id", "comment_id"])
    op.create_index("ix_likes_user_id", "likes", ["user_id"])

    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.Integer(), autoincrement=True, nullable=False),
        _user_fk("user_id"),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "comment_id",
            sa.Integer(),
            sa.ForeignKey("comments.comment_id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("facets", sa.JSON(), nullable=False),
        sa.Column("viewed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("notification_id"),
    )
    op.create_index(
        "ix_notifications_user_id_viewed",
        "notifications",
        ["user_id", "viewed"],
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    for index, table in (
        ("ix_notifications_user_id_viewed", "notifications"),
        ("ix_likes_user_id", "likes"),
        ("ix_likes_post_id_comment_id", "likes"),
        ("ix_comments_post_id", "comments"),
        ("ix_poll_votes_post_id", "poll_votes"),
        ("ix_images_post_id", "images"),
        ("ix_posts_created_at", "posts"),
        ("ix_posts_user_id_created_at", "posts"),
        ("ix_follows_following_id", "follows"),
    ):
        op.drop_index(index, table_name=table)
    for table in (
        "notifications",
        "likes",
        "comments",
        "poll_votes",
        "pinned_posts",
        "images",
        "posts",
        "user_relationships",
        "mutes",
        "blocks",
        "follows",
        "users",
    ):
        op.drop_table(table)
