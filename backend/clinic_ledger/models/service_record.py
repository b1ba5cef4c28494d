"""ServiceRecord model: one billable service instance for a patient."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class ServiceRecord(Base):
    """A service rendered to a patient, with its running payment state.

    A record is open while ``completion_date`` is null. Closing it requires
    ``outstanding`` to be zero.
    """

    __tablename__ = "service_records"
    __table_args__ = (
        Index("ix_service_records_patient_service", "patient_doc_id", "service_name"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    site_id = Column(
        UUIDType, ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Who rendered the service
    practitioner_name = Column(String(255), nullable=False, index=True)
    is_assistant = Column(Boolean, nullable=False, default=False)

    # Patient and service
    patient_name = Column(String(255), nullable=False)
    patient_doc_id = Column(String(50), nullable=False)
    service_name = Column(String(255), nullable=False)

    # Amounts
    billed_total = Column(Numeric(14, 2), nullable=False, default=0)
    outstanding = Column(Numeric(14, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(14, 2), nullable=False, default=0)
    deposit = Column(Numeric(14, 2), nullable=False, default=0)
    discount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_used = Column(Numeric(14, 2), nullable=False, default=0)

    # Payment channel details
    payment_method_id = Column(
        UUIDType, ForeignKey("payment_methods.id", ondelete="SET NULL"), nullable=True
    )
    deposit_method_id = Column(
        UUIDType, ForeignKey("payment_methods.id", ondelete="SET NULL"), nullable=True
    )
    payment_account_id = Column(
        UUIDType, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    deposit_account_id = Column(
        UUIDType, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    credit_holder = Column(String(255), nullable=True)
    credit_amount = Column(Numeric(14, 2), nullable=True)

    # Settlement
    percentage_tier_id = Column(Integer, nullable=True)
    is_own_patient = Column(Boolean, nullable=True, default=False)

    start_date = Column(Date, nullable=False, index=True)
    completion_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    # Bumped on every ledger update
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    payment_method = relationship("PaymentMethod", foreign_keys=[payment_method_id])
    deposit_method = relationship("PaymentMethod", foreign_keys=[deposit_method_id])

    @property
    def is_open(self) -> bool:
        return self.completion_date is None
