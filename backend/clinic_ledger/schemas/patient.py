"""Patient schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PatientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    doc_id: str = Field(min_length=1, max_length=50)
    credit_balance: Decimal = Field(default=Decimal("0"), ge=0)


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    doc_id: str
    credit_balance: Decimal
