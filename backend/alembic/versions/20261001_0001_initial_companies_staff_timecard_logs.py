"""initial: companies, staff, timecard_logs

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- companies ---
    op.create_table(
        "companies",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("contact_info", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- staff ---
    op.create_table(
        "staff",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("pin", sa.String(16), nullable=True),
        sa.Column("role", sa.String(32), nullable=True),
        sa.Column("hourly_wage", sa.Integer(), nullable=True),
        sa.Column("dependents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "tax_category",
            sa.Enum("甲", "乙", name="tax_category_enum"),
            nullable=True,
        ),
        sa.Column("allowance1_name", sa.String(64), nullable=True),
        sa.Column("allowance1_value", sa.Integer(), nullable=True),
        sa.Column("allowance2_name", sa.String(64), nullable=True),
        sa.Column("allowance2_value", sa.Integer(), nullable=True),
        sa.Column("allowance3_name", sa.String(64), nullable=True),
        sa.Column("allowance3_value", sa.Integer(), nullable=True),
        sa.Column("deduction1_name", sa.String(64), nullable=True),
        sa.Column("deduction1_value", sa.Integer(), nullable=True),
        sa.Column("deduction2_name", sa.String(64), nullable=True),
        sa.Column("deduction2_value", sa.Integer(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- timecard_logs ---
    op.create_table(
        "timecard_logs",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "event_type",
            sa.Enum(
                "clock_in", "break_start", "break_end", "clock_out",
                name="timecard_event_type_enum",
            ),
            nullable=False,
        ),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "is_modified_by_admin", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_timecard_logs_staff_time",
        "timecard_logs",
        ["staff_id", "timestamp"],
    )
    op.create_index(
        "ix_timecard_logs_timestamp",
        "timecard_logs",
        ["timestamp"],
    )


def downgrade() -> None:
    op.drop_index("ix_timecard_logs_timestamp", table_name="timecard_logs")
    op.drop_index("ix_timecard_logs_staff_time", table_name="timecard_logs")
    op.drop_table("timecard_logs")
    op.drop_table("staff")
    op.drop_table("companies")
    op.execute("DROP TYPE IF EXISTS timecard_event_type_enum")
    op.execute("DROP TYPE IF EXISTS tax_category_enum")
