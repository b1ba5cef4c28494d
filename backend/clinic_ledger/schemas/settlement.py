"""Settlement report schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SettlementRunRequest(BaseModel):
    doctor: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date


class SettlementReportLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    position: int
    record_id: UUID | None = None
    patient_name: str
    service_name: str
    doctor_name: str | None = None
    assistant_name: str | None = None
    deposit: Decimal
    discount: Decimal
    billed_total: Decimal
    is_own_patient: bool
    payout_fraction: Decimal
    payout_amount: Decimal
    payment_method: str | None = None
    deposit_method: str | None = None
    amount_paid: Decimal
    notes: str | None = None


class SettlementReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    site_id: UUID
    doctor: str
    start_date: date
    end_date: date
    generated_at: datetime
    total_payout: Decimal
    lines: list[SettlementReportLineResponse]
