"""Service record repository for data access."""

from collections.abc import Sequence
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.services.payment_ledger import LedgerState


class ServiceRecordRepository:
    """Repository for ServiceRecord model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        site_id: UUID,
        on_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ServiceRecord]:
        """Get a site's records, oldest first, with optional date filters."""
        query = self.db.query(ServiceRecord).filter(ServiceRecord.site_id == site_id)

        if on_date is not None:
            query = query.filter(ServiceRecord.start_date == on_date)
        if start_date is not None:
            query = query.filter(ServiceRecord.start_date >= start_date)
        if end_date is not None:
            query = query.filter(ServiceRecord.start_date <= end_date)

        query = query.order_by(ServiceRecord.start_date.asc(), ServiceRecord.created_at.asc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, site_id: UUID) -> int:
        return self.db.query(ServiceRecord).filter(ServiceRecord.site_id == site_id).count()

    def get_by_id(self, record_id: UUID, site_id: UUID | None = None) -> ServiceRecord | None:
        query = self.db.query(ServiceRecord).filter(ServiceRecord.id == record_id)
        if site_id is not None:
            query = query.filter(ServiceRecord.site_id == site_id)
        return query.first()

    def get_by_patient(self, site_id: UUID, patient_doc_id: str) -> list[ServiceRecord]:
        return (
            self.db.query(ServiceRecord)
            .filter(
                ServiceRecord.site_id == site_id,
                ServiceRecord.patient_doc_id == patient_doc_id,
            )
            .order_by(ServiceRecord.start_date.asc(), ServiceRecord.created_at.asc())
            .all()
        )

    def get_open_by_patient(self, site_id: UUID, patient_doc_id: str) -> list[ServiceRecord]:
        """Records of a patient that have not been closed yet."""
        return [r for r in self.get_by_patient(site_id, patient_doc_id) if r.is_open]

    def save_all(self, records: Sequence[ServiceRecord], *extra: Any) -> list[ServiceRecord]:
        """Add or update records (and related rows) in a single commit."""
        self.db.add_all(records)
        self.db.add_all(extra)
        self.db.commit()
        for record in records:
            self.db.refresh(record)
        return list(records)

    def write_ledger_state(
        self,
        record: ServiceRecord,
        state: LedgerState,
        **fields: Any,
    ) -> ServiceRecord:
        """Copy a ledger state and extra column values onto a record."""
        values = {
            "outstanding": state.outstanding,
            "amount_paid": state.amount_paid,
            "deposit": state.deposit,
            "completion_date": state.completion_date,
            **fields,
        }
        for key, value in values.items():
            setattr(record, key, value)
        return record

    def apply_ledger_update(
        self,
        record: ServiceRecord,
        state: LedgerState,
        **fields: Any,
    ) -> ServiceRecord:
        """Write a new ledger state onto a stored record and bump its version."""
        return self.write_ledger_state(record, state, version=(record.version or 0) + 1, **fields)

    def delete_many(self, record_ids: Sequence[UUID], site_id: UUID) -> int:
        """Delete the given records of a site. Returns the number deleted."""
        count = (
            self.db.query(ServiceRecord)
            .filter(ServiceRecord.id.in_(list(record_ids)), ServiceRecord.site_id == site_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count
