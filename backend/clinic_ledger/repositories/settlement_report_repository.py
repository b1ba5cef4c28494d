"""Settlement report repository for data access."""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_ledger.models.settlement_report import SettlementReport


class SettlementReportRepository:
    """Repository for SettlementReport model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        site_id: UUID | None = None,
        doctor: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[SettlementReport]:
        """List reports, newest first.

        ``date_from`` bounds the report start date and ``date_to`` the
        report end date, both inclusive.
        """
        query = self.db.query(SettlementReport)

        if site_id is not None:
            query = query.filter(SettlementReport.site_id == site_id)
        if doctor:
            query = query.filter(SettlementReport.doctor == doctor)
        if date_from is not None:
            query = query.filter(SettlementReport.start_date >= date_from)
        if date_to is not None:
            query = query.filter(SettlementReport.end_date <= date_to)

        return (
            query.order_by(SettlementReport.generated_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_id(self, report_id: UUID, site_id: UUID | None = None) -> SettlementReport | None:
        query = self.db.query(SettlementReport).filter(SettlementReport.id == report_id)
        if site_id is not None:
            query = query.filter(SettlementReport.site_id == site_id)
        return query.first()

    def create(self, report: SettlementReport) -> SettlementReport:
        """Persist a report together with its lines."""
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report
