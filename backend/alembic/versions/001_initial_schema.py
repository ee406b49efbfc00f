"""Initial schema: users, turfs, intervals and per-day guard rows.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(10), nullable=False, server_default=sa.text("'user'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('user', 'owner')", name="check_user_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Turfs table
    op.create_table(
        "turfs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(1000), nullable=False),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_turfs_id", "turfs", ["id"])
    op.create_index("ix_turfs_owner_id", "turfs", ["owner_id"])

    # Guard rows: one per (turf, date) that has ever been written
    op.create_table(
        "turf_days",
        sa.Column("turf_id", sa.Integer(), sa.ForeignKey("turfs.id"), primary_key=True),
        sa.Column("date", sa.Date(), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )

    # Bookings and blocks
    op.create_table(
        "intervals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("turf_id", sa.Integer(), sa.ForeignKey("turfs.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_hour", sa.Integer(), nullable=False),
        sa.Column("end_hour", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(10), nullable=False),
        sa.Column("holder_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("start_hour >= 0 AND start_hour <= 23", name="check_interval_start_hour"),
        sa.CheckConstraint("end_hour >= 1 AND end_hour <= 24", name="check_interval_end_hour"),
        sa.CheckConstraint("start_hour < end_hour", name="check_interval_ordered"),
        sa.CheckConstraint("kind IN ('booking', 'block')", name="check_interval_kind"),
    )
    op.create_index("ix_intervals_id", "intervals", ["id"])
    op.create_index("ix_intervals_holder_id", "intervals", ["holder_id"])
    # Every overlap query and occupied view filters on (turf_id, date)
    op.create_index("ix_intervals_turf_date", "intervals", ["turf_id", "date"])

    # Storage-level backstop for the version guard: int4range is half-open
    # '[)' so [14,16) and [16,18) do not collide while [14,16) and [15,17) do.
    if op.get_context().dialect.name == "postgresql":
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            "ALTER TABLE intervals ADD CONSTRAINT no_interval_overlap "
            "EXCLUDE USING gist ("
            "turf_id WITH =, date WITH =, int4range(start_hour, end_hour) WITH &&"
            ")"
        )


def downgrade() -> None:
    if op.get_context().dialect.name == "postgresql":
        op.execute("ALTER TABLE intervals DROP CONSTRAINT IF EXISTS no_interval_overlap")
    op.drop_table("intervals")
    op.drop_table("turf_days")
    op.drop_table("turfs")
    op.drop_table("users")
