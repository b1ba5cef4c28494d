"""Cash drawer API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from clinic_ledger.core.auth import get_request_context
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.core.exceptions import ClinicLedgerError, status_code_for
from clinic_ledger.schemas.cash_drawer import CashDrawerResponse, CashDrawerUpdate
from clinic_ledger.services.cash_drawer_service import CashDrawerService

router = APIRouter()


@router.get(
    "/",
    response_model=CashDrawerResponse,
    summary="Get cash drawer balance",
    responses={404: {"description": "Site not found"}},
)
async def get_cash_drawer(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> CashDrawerResponse:
    try:
        balance = CashDrawerService(db).get_balance(ctx)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None
    return CashDrawerResponse(site_id=ctx.site_id, balance=balance)  # type: ignore[arg-type]


@router.put(
    "/",
    response_model=CashDrawerResponse,
    summary="Set cash drawer balance",
    responses={
        403: {"description": "Only admins and owners may change the cash drawer"},
        404: {"description": "Site not found"},
    },
)
async def set_cash_drawer(
    data: CashDrawerUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> CashDrawerResponse:
    """Correct the cash drawer balance after a count."""
    try:
        balance = CashDrawerService(db).set_balance(ctx, data.balance)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None
    return CashDrawerResponse(site_id=ctx.site_id, balance=balance)  # type: ignore[arg-type]
