from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.doctor import Doctor
from clinic_ledger.schemas.doctor import DoctorCreate


class DoctorRepository:
    """Repository for Doctor model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, site_id: UUID) -> list[Doctor]:
        return (
            self.db.query(Doctor)
            .filter(Doctor.site_id == site_id)
            .order_by(Doctor.name.asc())
            .all()
        )

    def create(self, data: DoctorCreate) -> Doctor:
        doctor = Doctor(site_id=data.site_id, name=data.name)
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)
        return doctor
