"""Pending-balance resolution: which services a patient still owes on."""

from collections.abc import Iterable
from decimal import Decimal

from clinic_ledger.models.service_record import ServiceRecord


def is_pending(record: ServiceRecord) -> bool:
    """An open record with a positive outstanding value."""
    return record.completion_date is None and Decimal(str(record.outstanding or 0)) > 0


def resolve_pending(
    records: Iterable[ServiceRecord], patient_doc_id: str
) -> dict[str, list[ServiceRecord]]:
    """Group a patient's open, unpaid records by service name.

    Groups keep the order of ``records``; the first record of each group is
    the one shown and paid against. An empty dict means nothing is owed.
    """
    if not patient_doc_id:
        return {}

    grouped: dict[str, list[ServiceRecord]] = {}
    for record in records:
        if record.patient_doc_id != patient_doc_id or not is_pending(record):
            continue
        grouped.setdefault(str(record.service_name), []).append(record)
    return grouped


def find_open_record(
    records: Iterable[ServiceRecord], patient_doc_id: str, service_name: str
) -> ServiceRecord | None:
    """Return the open record for a patient and service, if there is one."""
    for record in records:
        if (
            record.patient_doc_id == patient_doc_id
            and record.service_name == service_name
            and record.completion_date is None
        ):
            return record
    return None
