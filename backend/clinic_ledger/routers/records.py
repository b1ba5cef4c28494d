"""Service record API endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from clinic_ledger.core.auth import get_request_context
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.core.exceptions import ClinicLedgerError, status_code_for
from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.schemas.service_record import (
    EntryResultResponse,
    PendingPaymentCreate,
    PendingPaymentResultResponse,
    PendingServiceGroup,
    RecordDeleteRequest,
    ServiceEntryCreate,
    ServiceRecordResponse,
)
from clinic_ledger.services.record_entry_service import RecordEntryService

router = APIRouter()


@router.get(
    "/",
    response_model=list[ServiceRecordResponse],
    summary="List service records",
    responses={400: {"description": "No site selected"}},
)
async def list_records(
    response: Response,
    on_date: date | None = Query(default=None, description="Only records started on this day"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[ServiceRecord]:
    """List the records of the selected site, oldest first."""
    service = RecordEntryService(db)
    try:
        records = service.list_records(ctx, on_date=on_date, skip=skip, limit=limit)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None
    response.headers["X-Total-Count"] = str(service.record_repo.count(ctx.site_id))  # type: ignore[arg-type]
    return records


@router.post(
    "/",
    response_model=EntryResultResponse,
    status_code=201,
    summary="Register services for a patient",
    responses={
        400: {"description": "Invalid submission"},
        404: {"description": "Unknown service, payment method or account"},
        502: {"description": "Records could not be stored"},
    },
)
async def register_services(
    data: ServiceEntryCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> EntryResultResponse:
    """Register the services of one visit with its payment, deposit and discount."""
    service = RecordEntryService(db)
    try:
        result = service.register_services(ctx, data)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None

    return EntryResultResponse(
        records=[ServiceRecordResponse.model_validate(r) for r in result.records],
        billed_total=result.valuation.billed_total,
        credit_applied=result.valuation.credit_applied,
        discount_applied=result.valuation.discount_applied,
        net_value=result.valuation.net_value,
        payment_to_charge=result.payment_to_charge,
        deposit_to_charge=result.deposit_to_charge,
        credit_added=result.credit_added,
        cash_drawer_adjustment=result.cash_drawer_adjustment,
        cash_drawer_error=result.cash_drawer_error,
    )


@router.get(
    "/pending/{patient_doc_id}",
    response_model=list[PendingServiceGroup],
    summary="List a patient's open records",
)
async def list_pending(
    patient_doc_id: str,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[PendingServiceGroup]:
    """Open records of a patient, grouped by service name."""
    service = RecordEntryService(db)
    try:
        groups = service.list_pending(ctx, patient_doc_id)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None

    return [
        PendingServiceGroup(
            service_name=name,
            outstanding=records[0].outstanding,  # type: ignore[arg-type]
            records=[ServiceRecordResponse.model_validate(r) for r in records],
        )
        for name, records in groups.items()
    ]


@router.post(
    "/pending/payments",
    response_model=PendingPaymentResultResponse,
    summary="Pay an open record",
    responses={
        404: {"description": "Record, payment method or account not found"},
        409: {"description": "Record was modified or is already closed"},
    },
)
async def pay_pending(
    data: PendingPaymentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> PendingPaymentResultResponse:
    """Apply a full or partial payment to an open record."""
    service = RecordEntryService(db)
    try:
        result = service.settle_pending(ctx, data)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None

    return PendingPaymentResultResponse(
        record=ServiceRecordResponse.model_validate(result.record),
        is_fully_paid=result.is_fully_paid,
        amount_to_charge=result.amount_to_charge,
        credit_added=result.credit_added,
        cash_drawer_adjustment=result.cash_drawer_adjustment,
        cash_drawer_error=result.cash_drawer_error,
    )


@router.post(
    "/delete",
    summary="Bulk delete service records",
    responses={403: {"description": "Only admins and owners may delete records"}},
)
async def delete_records(
    data: RecordDeleteRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> dict[str, int]:
    """Delete the selected records of the current site."""
    service = RecordEntryService(db)
    try:
        deleted = service.delete_records(ctx, data.ids)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None
    return {"deleted": deleted}


@router.get(
    "/{record_id}",
    response_model=ServiceRecordResponse,
    summary="Get service record",
    responses={404: {"description": "Service record not found"}},
)
async def get_record(
    record_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> ServiceRecord:
    if ctx.site_id is None:
        raise HTTPException(status_code=400, detail="Select a site first")
    service = RecordEntryService(db)
    record = service.record_repo.get_by_id(record_id, ctx.site_id)
    if not record:
        raise HTTPException(status_code=404, detail="Service record not found")
    return record
