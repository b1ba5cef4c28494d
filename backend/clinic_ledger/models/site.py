"""Site model: one clinic location with its own cash drawer."""

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, func

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class Site(Base):
    __tablename__ = "sites"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, unique=True)
    has_stadium_prices = Column(Boolean, nullable=False, default=False)

    # Caja base: cash on hand, adjusted by cash payments and deposits
    cash_drawer_balance = Column(Numeric(14, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
