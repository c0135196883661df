"""create users and timekeeping tables

Revision ID: 0001
Revises: None
Create Date: 2025-01-06
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="viewer"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_sessions_id"), "user_sessions", ["id"], unique=False)
    op.create_index(op.f("ix_user_sessions_token_hash"), "user_sessions", ["token_hash"], unique=True)

    op.create_table(
        "timesheets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_name", sa.String(length=200), nullable=False),
        sa.Column("pay_period", sa.String(length=50), nullable=False),
        sa.Column("detachment", sa.String(length=200), nullable=False),
        sa.Column("shift", sa.String(length=20), nullable=False),
        sa.Column("regular_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("overtime_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("night_differential", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_timesheets_id"), "timesheets", ["id"], unique=False)

    op.create_table(
        "dtrs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("timesheet_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("regular_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("overtime_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("night_differential", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["timesheet_id"], ["timesheets.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_dtrs_id"), "dtrs", ["id"], unique=False)
    op.create_index(op.f("ix_dtrs_timesheet_id"), "dtrs", ["timesheet_id"], unique=False)

    op.create_table(
        "timelogs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("dtr_id", sa.Integer(), nullable=False),
        sa.Column("mode", sa.String(length=3), nullable=False, server_default="in"),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["dtr_id"], ["dtrs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_timelogs_id"), "timelogs", ["id"], unique=False)
    op.create_index(op.f("ix_timelogs_dtr_id"), "timelogs", ["dtr_id"], unique=False)

    op.create_table(
        "clock_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("timelog_id", sa.Integer(), nullable=False),
        sa.Column("clock_time", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["timelog_id"], ["timelogs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clock_events_id"), "clock_events", ["id"], unique=False)
    op.create_index(op.f("ix_clock_events_timelog_id"), "clock_events", ["timelog_id"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_clock_events_timelog_id"), table_name="clock_events")
    op.drop_index(op.f("ix_clock_events_id"), table_name="clock_events")
    op.drop_table("clock_events")
    op.drop_index(op.f("ix_timelogs_dtr_id"), table_name="timelogs")
    op.drop_index(op.f("ix_timelogs_id"), table_name="timelogs")
    op.drop_table("timelogs")
    op.drop_index(op.f("ix_dtrs_timesheet_id"), table_name="dtrs")
    op.drop_index(op.f("ix_dtrs_id"), table_name="dtrs")
    op.drop_table("dtrs")
    op.drop_index(op.f("ix_timesheets_id"), table_name="timesheets")
    op.drop_table("timesheets")
    op.drop_index(op.f("ix_user_sessions_token_hash"), table_name="user_sessions")
    op.drop_index(op.f("ix_user_sessions_id"), table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
