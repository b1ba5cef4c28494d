"""Patient repository for data access."""

from decimal import Decimal

from sqlalchemy.orm import Session

from clinic_ledger.models.patient import Patient
from clinic_ledger.schemas.patient import PatientCreate


class PatientRepository:
    """Repository for Patient model."""

    def __init__(self, db: Session):
        self.db = db

    def search(self, name_prefix: str, limit: int = 20) -> list[Patient]:
        """Patients whose name starts with ``name_prefix`` (case-insensitive)."""
        return (
            self.db.query(Patient)
            .filter(Patient.name.ilike(f"{name_prefix}%"))
            .order_by(Patient.name.asc())
            .limit(limit)
            .all()
        )

    def get_by_doc_id(self, doc_id: str) -> Patient | None:
        return self.db.query(Patient).filter(Patient.doc_id == doc_id).first()

    def create(self, data: PatientCreate) -> Patient:
        patient = Patient(
            name=data.name,
            doc_id=data.doc_id,
            credit_balance=data.credit_balance,
        )
        self.db.add(patient)
        self.db.commit()
        self.db.refresh(patient)
        return patient

    def get_or_build(self, doc_id: str, name: str) -> Patient:
        """Return the stored patient or a new, unsaved one."""
        patient = self.get_by_doc_id(doc_id)
        if patient is None:
            patient = Patient(name=name, doc_id=doc_id, credit_balance=Decimal("0"))
            self.db.add(patient)
        return patient

    def set_credit_balance(self, patient: Patient, balance: Decimal) -> Patient:
        """Set the saldo a favor. Saved together with the records of the visit."""
        patient.credit_balance = balance  # type: ignore[assignment]
        return patient
