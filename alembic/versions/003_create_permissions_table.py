"""create permissions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 10:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "permissions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("application_id", sa.String(36), nullable=False),
        sa.Column("function_name", sa.String(100), nullable=False),
        sa.Column("permission_level", sa.String(20), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            name="fk_permissions_application_id",
        ),
        sa.CheckConstraint(
            "permission_level IN ('read', 'write', 'update', 'delete')",
            name="ck_permissions_permission_level",
        ),
    )
    op.create_index(
        "ix_permissions_application_id", "permissions", ["application_id"], unique=False
    )
    op.create_index(
        "uq_permissions_app_function_level_live",
        "permissions",
        ["application_id", "function_name", "permission_level"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_permissions_app_function_level_live", table_name="permissions")
    op.drop_index("ix_permissions_application_id", table_name="permissions")
    op.drop_table("permissions")
