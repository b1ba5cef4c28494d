"""Aggregate per-record payouts into a settlement report for one practitioner."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.services.settlement_calculator import TierRules, compute_line


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ComputedLine:
    record: ServiceRecord
    payout_fraction: Decimal
    payout_amount: Decimal


@dataclass(frozen=True)
class ComputedReport:
    doctor: str
    start_date: date
    end_date: date
    generated_at: datetime
    lines: tuple[ComputedLine, ...]
    total_payout: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.lines


def build_report(
    doctor: str,
    date_range: DateRange,
    records: Iterable[ServiceRecord],
    tier_rules: TierRules,
    generated_at: datetime | None = None,
) -> ComputedReport:
    """Settle every record of ``doctor`` whose start date falls in the range.

    No matching records gives an empty report with a zero total.
    """
    lines = []
    total = Decimal("0")
    for record in records:
        if record.practitioner_name != doctor or not date_range.contains(record.start_date):
            continue
        computed = compute_line(record, tier_rules)
        lines.append(
            ComputedLine(
                record=record,
                payout_fraction=computed.payout_fraction,
                payout_amount=computed.payout_amount,
            )
        )
        total += computed.payout_amount

    return ComputedReport(
        doctor=doctor,
        start_date=date_range.start,
        end_date=date_range.end,
        generated_at=generated_at or datetime.now(UTC),
        lines=tuple(lines),
        total_payout=total,
    )
