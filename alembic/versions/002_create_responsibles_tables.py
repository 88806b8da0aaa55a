"""create responsible_categories and responsibles tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 10:10:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_ROWS = "deleted_at IS NULL"


def upgrade() -> None:
    op.create_table(
        "responsible_categories",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_responsible_categories_tenant_id",
        "responsible_categories",
        ["tenant_id"],
        unique=False,
    )
    op.create_index(
        "uq_responsible_categories_tenant_name_live",
        "responsible_categories",
        ["tenant_id", "name"],
        unique=True,
        postgresql_where=sa.text(LIVE_ROWS),
        sqlite_where=sa.text(LIVE_ROWS),
    )

    op.create_table(
        "responsibles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("code_responsible", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category_responsible_id", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["category_responsible_id"],
            ["responsible_categories.id"],
            name="fk_responsibles_category_responsible_id",
        ),
    )
    op.create_index("ix_responsibles_tenant_id", "responsibles", ["tenant_id"], unique=False)
    # Code and name are unique per tenant among non-deleted rows
    op.create_index(
        "uq_responsibles_tenant_code_live",
        "responsibles",
        ["tenant_id", "code_responsible"],
        unique=True,
        postgresql_where=sa.text(LIVE_ROWS),
        sqlite_where=sa.text(LIVE_ROWS),
    )
    op.create_index(
        "uq_responsibles_tenant_name_live",
        "responsibles",
        ["tenant_id", "name"],
        unique=True,
        postgresql_where=sa.text(LIVE_ROWS),
        sqlite_where=sa.text(LIVE_ROWS),
    )


def downgrade() -> None:
    op.drop_index("uq_responsibles_tenant_name_live", table_name="responsibles")
    op.drop_index("uq_responsibles_tenant_code_live", table_name="responsibles")
    op.drop_index("ix_responsibles_tenant_id", table_name="responsibles")
    op.drop_table("responsibles")
    op.drop_index(
        "uq_responsible_categories_tenant_name_live", table_name="responsible_categories"
    )
    op.drop_index("ix_responsible_categories_tenant_id", table_name="responsible_categories")
    op.drop_table("responsible_categories")
