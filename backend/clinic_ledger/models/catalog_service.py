"""Catalog of billable dental services."""

from enum import Enum

from sqlalchemy import Column, DateTime, Numeric, String, UniqueConstraint, func

from clinic_ledger.core.database import Base
from clinic_ledger.models.shared import UUIDType, generate_uuid


class PriceList(str, Enum):
    STANDARD = "standard"
    STADIUM = "stadium"


class CatalogService(Base):
    """A service with its price in one price list."""

    __tablename__ = "catalog_services"
    __table_args__ = (
        UniqueConstraint("name", "price_list", name="uq_catalog_services_name_price_list"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(14, 2), nullable=False)
    price_list = Column(String(20), nullable=False, default=PriceList.STANDARD.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
