from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, func

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = (UniqueConstraint("site_id", "name", name="uq_doctors_site_id_name"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    site_id = Column(
        UUIDType, ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
