"""Service record schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PaymentInput(BaseModel):
    """A payment or deposit taken at the front desk."""

    method: str = Field(min_length=1, max_length=100)
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    account_id: UUID | None = None
    credit_amount: Decimal | None = Field(default=None, ge=0)
    credit_holder: str | None = Field(default=None, max_length=255)


class DiscountInput(BaseModel):
    value: Decimal = Field(ge=0)
    is_percentage: bool = False


class ServiceEntryCreate(BaseModel):
    """One patient visit: the services rendered and how they were paid."""

    practitioner_name: str = Field(min_length=1, max_length=255)
    is_assistant: bool = False
    patient_name: str = Field(min_length=1, max_length=255)
    patient_doc_id: str = Field(min_length=1, max_length=50)
    service_names: list[str]
    entry_date: date
    is_own_patient: bool = False
    percentage_tier_id: int | None = Field(default=None, ge=1)
    use_stadium_prices: bool = False
    payment: PaymentInput | None = None
    deposit: PaymentInput | None = None
    discount: DiscountInput | None = None
    notes: str | None = None


class PendingPaymentCreate(BaseModel):
    """Payment against an open record picked from the pending list."""

    record_id: UUID
    amount: Decimal = Field(ge=0)
    payment_method: str | None = Field(default=None, max_length=100)
    account_id: UUID | None = None
    credit_amount: Decimal | None = Field(default=None, ge=0)
    credit_holder: str | None = Field(default=None, max_length=255)
    payment_date: date
    expected_version: int | None = Field(default=None, ge=1)


class RecordDeleteRequest(BaseModel):
    ids: list[UUID]


class ServiceRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    site_id: UUID
    practitioner_name: str
    is_assistant: bool
    patient_name: str
    patient_doc_id: str
    service_name: str
    billed_total: Decimal
    outstanding: Decimal
    amount_paid: Decimal
    deposit: Decimal
    discount: Decimal
    credit_used: Decimal
    payment_method_id: UUID | None = None
    deposit_method_id: UUID | None = None
    payment_account_id: UUID | None = None
    deposit_account_id: UUID | None = None
    credit_holder: str | None = None
    credit_amount: Decimal | None = None
    percentage_tier_id: int | None = None
    is_own_patient: bool | None = None
    start_date: date
    completion_date: date | None = None
    notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class PendingServiceGroup(BaseModel):
    service_name: str
    outstanding: Decimal
    records: list[ServiceRecordResponse]


class EntryResultResponse(BaseModel):
    records: list[ServiceRecordResponse]
    billed_total: Decimal
    credit_applied: Decimal
    discount_applied: Decimal
    net_value: Decimal
    payment_to_charge: Decimal
    deposit_to_charge: Decimal
    credit_added: Decimal
    cash_drawer_adjustment: Decimal
    cash_drawer_error: str | None = None


class PendingPaymentResultResponse(BaseModel):
    record: ServiceRecordResponse
    is_fully_paid: bool
    amount_to_charge: Decimal
    credit_added: Decimal
    cash_drawer_adjustment: Decimal
    cash_drawer_error: str | None = None
