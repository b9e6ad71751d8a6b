"""initial schema

Revision ID: 202610170900
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202610170900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("pk", sa.Integer(), primary_key=True),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("id"),
        sa.CheckConstraint("id > 0", name="ck_users_id_positive"),
    )

    op.create_table(
        "costs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("userid", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("sum", sa.Float(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("sum >= 0", name="ck_costs_sum_non_negative"),
    )
    op.create_index("ix_costs_userid_date", "costs", ["userid", "date"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("userid", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("costs", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("userid", "year", "month", name="uq_report_user_month"),
        sa.CheckConstraint("year > 0", name="ck_reports_year_positive"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_reports_month_range"),
    )

    op.create_table(
        "logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("time", sa.DateTime(), nullable=False),
        sa.Column("method", sa.String(length=10), nullable=False),
        sa.Column("port", sa.Integer()),
        sa.Column("path", sa.Text(), nullable=False),
        sa.Column("status", sa.Integer()),
        sa.Column("duration_ms", sa.Integer()),
        sa.Column("message", sa.Text(), nullable=False),
    )
    op.create_index("ix_logs_time", "logs", ["time"])


def downgrade():
    op.drop_index("ix_logs_time", table_name="logs")
    op.drop_table("logs")
    op.drop_table("reports")
    op.drop_index("ix_costs_userid_date", table_name="costs")
    op.drop_table("costs")
    op.drop_table("users")
