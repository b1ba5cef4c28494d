"""Payment method schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clinic_ledger.models.payment_method import PaymentMethodKind


class PaymentMethodCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    kind: PaymentMethodKind | None = None


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    kind: str
