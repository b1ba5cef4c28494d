from sqlalchemy import Column, Integer, Numeric, String

from clinic_ledger.core.database import Base


class PercentageTier(Base):
    """Stored payout fraction for a settlement tier."""

    __tablename__ = "percentage_tiers"

    id = Column(Integer, primary_key=True, autoincrement=False)
    fraction = Column(Numeric(5, 4), nullable=False)
    description = Column(String(255), nullable=True)
