"""create settlement reports table

Revision ID: c61f0e5a4d28
Revises: 8d4e2b7c0a93
Create Date: 2026-10-02 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c61f0e5a4d28"
down_revision = "8d4e2b7c0a93"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "settlement_reports",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("site_id", sa.String(length=36), nullable=False),
        sa.Column("doctor", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_payout", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_settlement_reports_site_id", "settlement_reports", ["site_id"], unique=False)
    op.create_index("ix_settlement_reports_doctor", "settlement_reports", ["doctor"], unique=False)

    op.create_table(
        "settlement_report_lines",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("report_id", sa.String(length=36), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("record_id", sa.String(length=36), nullable=True),
        sa.Column("site_id", sa.String(length=36), nullable=False),
        sa.Column("patient_name", sa.String(length=255), nullable=False),
        sa.Column("service_name", sa.String(length=255), nullable=False),
        sa.Column("doctor_name", sa.String(length=255), nullable=True),
        sa.Column("assistant_name", sa.String(length=255), nullable=True),
        sa.Column("deposit", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("billed_total", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("is_own_patient", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("payout_fraction", sa.Numeric(precision=5, scale=4), nullable=False),
        sa.Column("payout_amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("payment_method", sa.String(length=100), nullable=True),
        sa.Column("deposit_method", sa.String(length=100), nullable=True),
        sa.Column("amount_paid", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["report_id"], ["settlement_reports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_settlement_report_lines_report_id", "settlement_report_lines", ["report_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_settlement_report_lines_report_id", table_name="settlement_report_lines")
    op.drop_table("settlement_report_lines")
    op.drop_index("ix_settlement_reports_doctor", table_name="settlement_reports")
    op.drop_index("ix_settlement_reports_site_id", table_name="settlement_reports")
    op.drop_table("settlement_reports")
