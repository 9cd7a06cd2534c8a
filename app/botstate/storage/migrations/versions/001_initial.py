"""Initial tables: user_states, user_fields

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_states",
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("current_state", sa.String(255), server_default="", nullable=False),
        sa.Column("state_with_callback", sa.String(255), server_default="", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "user_fields",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["user_states.user_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "key", name="uq_user_field_key"),
    )
    op.create_index("ix_user_fields_user_id", "user_fields", ["user_id"])


def downgrade() -> None:
    op.drop_table("user_fields")
    op.drop_table("user_states")
