"""post reports

Revision ID: 8d2e4a7c1f53
Revises: 3b1f6c2a9d40
Create Date: 2026-10-18 15:40:02.771930

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d2e4a7c1f53"
down_revision: Union[str, Sequence[str], None] = "3b1f6c2a9d40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the post_reports table."""
    op.create_table(
        "post_reports",
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.post_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "reporter_id",
            sa.Integer(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "reporter_id"),
    )


def downgrade() -> None:
    """Drop the post_reports table."""
    op.drop_table("post_reports")
