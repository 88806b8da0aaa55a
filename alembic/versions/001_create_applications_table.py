"""create applications table

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_ROWS = "deleted_at IS NULL"


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # Names are unique among non-deleted rows only
    op.create_index(
        "uq_applications_name_live",
        "applications",
        ["name"],
        unique=True,
        postgresql_where=sa.text(LIVE_ROWS),
        sqlite_where=sa.text(LIVE_ROWS),
    )
    op.create_index(
        "uq_applications_display_name_live",
        "applications",
        ["display_name"],
        unique=True,
        postgresql_where=sa.text(LIVE_ROWS),
        sqlite_where=sa.text(LIVE_ROWS),
    )


def downgrade() -> None:
    op.drop_index("uq_applications_display_name_live", table_name="applications")
    op.drop_index("uq_applications_name_live", table_name="applications")
    op.drop_table("applications")
