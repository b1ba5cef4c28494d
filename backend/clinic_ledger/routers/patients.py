"""Patient API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from clinic_ledger.core.auth import get_request_context
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.core.exceptions import ClinicLedgerError, status_code_for
from clinic_ledger.models.patient import Patient
from clinic_ledger.schemas.patient import PatientResponse
from clinic_ledger.services.patient_service import PatientService

router = APIRouter()


@router.get(
    "/search",
    response_model=list[PatientResponse],
    summary="Search patients by name",
    responses={400: {"description": "Query too short"}},
)
async def search_patients(
    q: str = Query(..., max_length=255, description="Start of the patient name"),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[Patient]:
    """Autocomplete patients, including their credit balance."""
    try:
        return PatientService(db).search(q, limit=limit)
    except ClinicLedgerError as e:
        raise HTTPException(status_code=status_code_for(e), detail=str(e)) from None
