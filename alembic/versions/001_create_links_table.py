"""Create links table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the links table."""
    op.create_table(
        "links",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "slug",
            sa.String(64),
            nullable=False,
            comment="Operator-chosen short token (e.g., 'promo')",
        ),
        sa.Column(
            "url",
            sa.Text(),
            nullable=False,
            comment="Destination URL to redirect to",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_links")),
        sa.UniqueConstraint("slug", name=op.f("uq_links_slug")),
    )
    op.create_index(op.f("ix_links_slug"), "links", ["slug"])


def downgrade() -> None:
    """Drop the links table."""
    op.drop_index(op.f("ix_links_slug"), table_name="links")
    op.drop_table("links")
