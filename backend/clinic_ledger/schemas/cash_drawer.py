"""Cash drawer (caja base) schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class CashDrawerUpdate(BaseModel):
    balance: Decimal = Field(ge=0)


class CashDrawerResponse(BaseModel):
    site_id: UUID
    balance: Decimal
