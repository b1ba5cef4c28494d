"""create service records table

Revision ID: 8d4e2b7c0a93
Revises: 3f1a9c2e7b10
Create Date: 2026-10-01 00:10:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8d4e2b7c0a93"
down_revision = "3f1a9c2e7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "service_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("site_id", sa.String(length=36), nullable=False),
        sa.Column("practitioner_name", sa.String(length=255), nullable=False),
        sa.Column("is_assistant", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("patient_name", sa.String(length=255), nullable=False),
        sa.Column("patient_doc_id", sa.String(length=50), nullable=False),
        sa.Column("service_name", sa.String(length=255), nullable=False),
        sa.Column("billed_total", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("outstanding", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("amount_paid", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("deposit", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("credit_used", sa.Numeric(precision=14, scale=2), nullable=False, server_default="0"),
        sa.Column("payment_method_id", sa.String(length=36), nullable=True),
        sa.Column("deposit_method_id", sa.String(length=36), nullable=True),
        sa.Column("payment_account_id", sa.String(length=36), nullable=True),
        sa.Column("deposit_account_id", sa.String(length=36), nullable=True),
        sa.Column("credit_holder", sa.String(length=255), nullable=True),
        sa.Column("credit_amount", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("percentage_tier_id", sa.Integer(), nullable=True),
        sa.Column("is_own_patient", sa.Boolean(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["payment_method_id"], ["payment_methods.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["deposit_method_id"], ["payment_methods.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["payment_account_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["deposit_account_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_service_records_site_id", "service_records", ["site_id"], unique=False)
    op.create_index(
        "ix_service_records_practitioner_name", "service_records", ["practitioner_name"], unique=False
    )
    op.create_index("ix_service_records_start_date", "service_records", ["start_date"], unique=False)
    op.create_index(
        "ix_service_records_patient_service",
        "service_records",
        ["patient_doc_id", "service_name"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_service_records_patient_service", table_name="service_records")
    op.drop_index("ix_service_records_start_date", table_name="service_records")
    op.drop_index("ix_service_records_practitioner_name", table_name="service_records")
    op.drop_index("ix_service_records_site_id", table_name="service_records")
    op.drop_table("service_records")
