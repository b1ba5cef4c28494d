"""Flatten settlement reports into export rows and CSV."""

import csv
import io
import unicodedata
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from clinic_ledger.models.settlement_report import SettlementReport

EXPORT_COLUMNS = [
    "patient_name",
    "service_name",
    "doctor_name",
    "assistant_name",
    "deposit",
    "discount",
    "billed_total",
    "is_own_patient",
    "payout_fraction",
    "payment_method",
    "deposit_method",
    "amount_paid",
    "notes",
]


def _money(value: Any) -> str:
    return str(Decimal(str(value or 0)).quantize(Decimal("0.01")))


class SettlementExportService:
    """Renders stored settlement reports for spreadsheets."""

    def rows(self, report: SettlementReport) -> list[dict[str, Any]]:
        """One flat row per settled record, in report order."""
        return [
            {
                "patient_name": line.patient_name,
                "service_name": line.service_name,
                "doctor_name": line.doctor_name or "",
                "assistant_name": line.assistant_name or "",
                "deposit": _money(line.deposit),
                "discount": _money(line.discount),
                "billed_total": _money(line.billed_total),
                "is_own_patient": "yes" if line.is_own_patient else "no",
                "payout_fraction": str(Decimal(str(line.payout_fraction)).normalize()),
                "payment_method": line.payment_method or "",
                "deposit_method": line.deposit_method or "",
                "amount_paid": _money(line.amount_paid),
                "notes": line.notes or "",
            }
            for line in report.lines
        ]

    def to_csv(self, rows: Iterable[dict[str, Any]]) -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
        return output.getvalue()

    def export_report(self, report: SettlementReport) -> str:
        return self.to_csv(self.rows(report))

    @staticmethod
    def filename(report: SettlementReport) -> str:
        folded = unicodedata.normalize("NFKD", str(report.doctor))
        ascii_name = folded.encode("ascii", "ignore").decode("ascii")
        doctor = "_".join(ascii_name.split()).lower()
        return f"settlement_{doctor}_{report.start_date}_{report.end_date}.csv"
