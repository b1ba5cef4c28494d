"""Site schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SiteCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    has_stadium_prices: bool = False
    cash_drawer_balance: Decimal = Field(default=Decimal("0"), ge=0)


class SiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    has_stadium_prices: bool
    cash_drawer_balance: Decimal
    created_at: datetime
