"""Patient lookup for the service entry form."""

from sqlalchemy.orm import Session

from clinic_ledger.core.config import settings
from clinic_ledger.core.exceptions import ValidationError
from clinic_ledger.models.patient import Patient
from clinic_ledger.repositories.patient_repository import PatientRepository


class PatientService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientRepository(db)

    def search(self, query: str, limit: int = 20) -> list[Patient]:
        """Patients whose name starts with ``query``."""
        query = query.strip()
        if len(query) < settings.PATIENT_SEARCH_MIN_LENGTH:
            raise ValidationError(
                f"Type at least {settings.PATIENT_SEARCH_MIN_LENGTH} characters to search"
            )
        return self.repo.search(query, limit=limit)
