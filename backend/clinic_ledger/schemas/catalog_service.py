"""Catalog service schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clinic_ledger.models.catalog_service import PriceList


class CatalogServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0)
    price_list: PriceList = PriceList.STANDARD


class CatalogServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    price: Decimal
    price_list: str
