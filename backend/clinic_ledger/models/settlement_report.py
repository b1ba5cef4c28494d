"""Settlement report (liquidación) models."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class SettlementReport(Base):
    """A persisted settlement run for one practitioner over a date range.

    Reports are written once and never updated.
    """

    __tablename__ = "settlement_reports"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    site_id = Column(
        UUIDType, ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    doctor = Column(String(255), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    generated_at = Column(DateTime(timezone=True), nullable=False)
    total_payout = Column(Numeric(14, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lines = relationship(
        "SettlementReportLine",
        order_by="SettlementReportLine.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class SettlementReportLine(Base):
    """Snapshot of one service record as it was settled."""

    __tablename__ = "settlement_report_lines"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    report_id = Column(
        UUIDType,
        ForeignKey("settlement_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False)
    record_id = Column(UUIDType, nullable=True)
    site_id = Column(UUIDType, nullable=False)

    patient_name = Column(String(255), nullable=False)
    service_name = Column(String(255), nullable=False)
    doctor_name = Column(String(255), nullable=True)
    assistant_name = Column(String(255), nullable=True)
    deposit = Column(Numeric(14, 2), nullable=False, default=0)
    discount = Column(Numeric(14, 2), nullable=False, default=0)
    billed_total = Column(Numeric(14, 2), nullable=False, default=0)
    is_own_patient = Column(Boolean, nullable=False, default=False)
    payout_fraction = Column(Numeric(5, 4), nullable=False)
    payout_amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(100), nullable=True)
    deposit_method = Column(String(100), nullable=True)
    amount_paid = Column(Numeric(14, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
