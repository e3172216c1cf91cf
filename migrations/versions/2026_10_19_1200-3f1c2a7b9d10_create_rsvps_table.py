"""Create rsvps table.

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7b9d10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create rsvps table unless a previous start already created it."""
    if sa.inspect(op.get_bind()).has_table("rsvps"):
        return

    op.create_table(
        "rsvps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("attending", sa.Text, nullable=False),
        sa.Column("guests", sa.Integer, nullable=True),
        sa.Column("allergies", sa.Text, nullable=True),
        sa.Column("other_allergies", sa.Text, nullable=True),
        sa.Column("song", sa.Text, nullable=True),
        sa.Column("transport", sa.Text, nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    """Drop rsvps table."""
    op.drop_table("rsvps")
