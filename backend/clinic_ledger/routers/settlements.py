"""Settlement API endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from clinic_ledger.core.auth import get_request_context
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.core.exceptions import ClinicLedgerError, status_code_for
from clinic_ledger.models.settlement_report import SettlementReport
from clinic_ledger.schemas.settlement import (
    SettlementReportResponse,
    SettlementRunRequest,
)
from clinic_ledger.services.settlement_export_service import SettlementExportService
from clinic_ledger.services.settlement_service import SettlementService

router = APIRouter()


@router.post(
    "/",
    response_model=SettlementReportResponse,
    summary="Run a settlement",
    responses={400: {"description": "No site or doctor selected"}},
)
async def run_settlement(
    data: SettlementRunRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> SettlementReportResponse:
    """Settle a doctor's records for a date range.

    A settlement with no records is returned without an id and is not stored.
    """
    service = SettlementService(db)
    try:
        computed, report = service.run_settlement(
            ctx, data.doctor, data.start_date, data.end_date
        )
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None

    if report is not None:
        return SettlementReportResponse.model_validate(report)
    return SettlementReportResponse(
        site_id=ctx.site_id,  # type: ignore[arg-type]
        doctor=computed.doctor,
        start_date=computed.start_date,
        end_date=computed.end_date,
        generated_at=computed.generated_at,
        total_payout=computed.total_payout,
        lines=[],
    )


@router.get(
    "/",
    response_model=list[SettlementReportResponse],
    summary="List settlements",
)
async def list_settlements(
    doctor: str | None = None,
    date_from: date | None = Query(default=None, description="Start date on or after"),
    date_to: date | None = Query(default=None, description="End date on or before"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[SettlementReport]:
    """Settlement history, newest first."""
    return SettlementService(db).list_reports(
        site_id=ctx.site_id,
        doctor=doctor,
        date_from=date_from,
        date_to=date_to,
        skip=skip,
        limit=limit,
    )


@router.get(
    "/{report_id}",
    response_model=SettlementReportResponse,
    summary="Get settlement",
    responses={404: {"description": "Settlement not found"}},
)
async def get_settlement(
    report_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> SettlementReport:
    try:
        return SettlementService(db).get_report(report_id, ctx.site_id)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None


@router.get(
    "/{report_id}/export",
    summary="Export settlement as CSV",
    responses={404: {"description": "Settlement not found"}},
)
async def export_settlement(
    report_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> Response:
    """Download the settlement rows as a CSV file."""
    try:
        report = SettlementService(db).get_report(report_id, ctx.site_id)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None

    exporter = SettlementExportService()
    return Response(
        content=exporter.export_report(report),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{exporter.filename(report)}"'
        },
    )
