from clinic_ledger.repositories.account_repository import AccountRepository
from clinic_ledger.repositories.assistant_repository import AssistantRepository
from clinic_ledger.repositories.catalog_service_repository import CatalogServiceRepository
from clinic_ledger.repositories.doctor_repository import DoctorRepository
from clinic_ledger.repositories.patient_repository import PatientRepository
from clinic_ledger.repositories.payment_method_repository import PaymentMethodRepository
from clinic_ledger.repositories.percentage_tier_repository import PercentageTierRepository
from clinic_ledger.repositories.service_record_repository import ServiceRecordRepository
from clinic_ledger.repositories.settlement_report_repository import (
    SettlementReportRepository,
)
from clinic_ledger.repositories.site_repository import SiteRepository

__all__ = [
    "AccountRepository",
    "AssistantRepository",
    "CatalogServiceRepository",
    "DoctorRepository",
    "PatientRepository",
    "PaymentMethodRepository",
    "PercentageTierRepository",
    "ServiceRecordRepository",
    "SettlementReportRepository",
    "SiteRepository",
]
