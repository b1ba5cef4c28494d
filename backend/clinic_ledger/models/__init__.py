from clinic_ledger.models.account import Account
from clinic_ledger.models.assistant import Assistant
from clinic_ledger.models.catalog_service import CatalogService, PriceList
from clinic_ledger.models.doctor import Doctor
from clinic_ledger.models.patient import Patient
from clinic_ledger.models.payment_method import PaymentMethod, PaymentMethodKind
from clinic_ledger.models.percentage_tier import PercentageTier
from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.models.settlement_report import SettlementReport, SettlementReportLine
from clinic_ledger.models.site import Site

__all__ = [
    "Account",
    "Assistant",
    "CatalogService",
    "Doctor",
    "Patient",
    "PaymentMethod",
    "PaymentMethodKind",
    "PercentageTier",
    "PriceList",
    "ServiceRecord",
    "SettlementReport",
    "SettlementReportLine",
    "Site",
]
