"""Settlement (liquidación) runs and history."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.exceptions import NotFoundError, UpstreamFailure, ValidationError
from clinic_ledger.models.settlement_report import SettlementReport, SettlementReportLine
from clinic_ledger.repositories.percentage_tier_repository import PercentageTierRepository
from clinic_ledger.repositories.service_record_repository import ServiceRecordRepository
from clinic_ledger.repositories.settlement_report_repository import (
    SettlementReportRepository,
)
from clinic_ledger.services.settlement_aggregator import ComputedReport, DateRange, build_report
from clinic_ledger.services.settlement_calculator import TierRules

logger = logging.getLogger(__name__)


def report_lines(computed: ComputedReport, site_id: UUID) -> list[SettlementReportLine]:
    """Snapshot the settled records as report lines, in settlement order."""
    lines = []
    for position, line in enumerate(computed.lines, start=1):
        record = line.record
        payment_method = record.payment_method
        deposit_method = record.deposit_method
        lines.append(
            SettlementReportLine(
                position=position,
                record_id=record.id,
                site_id=record.site_id or site_id,
                patient_name=record.patient_name,
                service_name=record.service_name,
                doctor_name=None if record.is_assistant else record.practitioner_name,
                assistant_name=record.practitioner_name if record.is_assistant else None,
                deposit=record.deposit or 0,
                discount=record.discount or 0,
                billed_total=record.billed_total or 0,
                is_own_patient=bool(record.is_own_patient),
                payout_fraction=line.payout_fraction,
                payout_amount=line.payout_amount,
                payment_method=payment_method.name if payment_method is not None else None,
                deposit_method=deposit_method.name if deposit_method is not None else None,
                amount_paid=record.amount_paid or 0,
                notes=record.notes,
            )
        )
    return lines


class SettlementService:
    """Runs settlements for a practitioner and serves the settlement history."""

    def __init__(self, db: Session):
        self.db = db
        self.record_repo = ServiceRecordRepository(db)
        self.report_repo = SettlementReportRepository(db)
        self.tier_repo = PercentageTierRepository(db)

    def tier_rules(self) -> TierRules:
        return TierRules.from_tiers(self.tier_repo.get_all())

    def compute(
        self, ctx: RequestContext, doctor: str, start_date: date, end_date: date
    ) -> ComputedReport:
        """Compute a settlement without storing it."""
        if ctx.site_id is None:
            raise ValidationError("Select a site first")
        if not doctor or not doctor.strip():
            raise ValidationError("Select a doctor")

        records = self.record_repo.get_all(
            ctx.site_id, start_date=start_date, end_date=end_date
        )
        return build_report(doctor, DateRange(start_date, end_date), records, self.tier_rules())

    def run_settlement(
        self, ctx: RequestContext, doctor: str, start_date: date, end_date: date
    ) -> tuple[ComputedReport, SettlementReport | None]:
        """Compute and store a settlement.

        Empty settlements are returned but not stored.
        """
        computed = self.compute(ctx, doctor, start_date, end_date)
        if computed.is_empty:
            logger.info(
                "No records to settle for %s between %s and %s", doctor, start_date, end_date
            )
            return computed, None

        report = SettlementReport(
            site_id=ctx.site_id,
            doctor=computed.doctor,
            start_date=computed.start_date,
            end_date=computed.end_date,
            generated_at=computed.generated_at,
            total_payout=computed.total_payout,
            lines=report_lines(computed, ctx.site_id),  # type: ignore[arg-type]
        )
        try:
            report = self.report_repo.create(report)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to store settlement for %s", doctor)
            raise UpstreamFailure(f"Could not store settlement: {e}") from e

        logger.info(
            "Settled %d records for %s between %s and %s: total %s",
            len(computed.lines),
            doctor,
            start_date,
            end_date,
            computed.total_payout,
        )
        return computed, report

    def list_reports(
        self,
        site_id: UUID | None = None,
        doctor: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[SettlementReport]:
        return self.report_repo.get_all(
            site_id=site_id,
            doctor=doctor,
            date_from=date_from,
            date_to=date_to,
            skip=skip,
            limit=limit,
        )

    def get_report(self, report_id: UUID, site_id: UUID | None = None) -> SettlementReport:
        report = self.report_repo.get_by_id(report_id, site_id)
        if not report:
            raise NotFoundError(f"Settlement {report_id} not found")
        return report
