"""Patient model with the prepaid credit balance (saldo a favor)."""

from sqlalchemy import Column, DateTime, Numeric, String, func

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class Patient(Base):
    __tablename__ = "patients"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    doc_id = Column(String(50), nullable=False, unique=True, index=True)
    credit_balance = Column(Numeric(14, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
