from clinic_ledger.schemas.account import AccountCreate, AccountResponse
from clinic_ledger.schemas.assistant import AssistantCreate, AssistantResponse
from clinic_ledger.schemas.cash_drawer import CashDrawerResponse, CashDrawerUpdate
from clinic_ledger.schemas.catalog_service import CatalogServiceCreate, CatalogServiceResponse
from clinic_ledger.schemas.doctor import DoctorCreate, DoctorResponse
from clinic_ledger.schemas.patient import PatientCreate, PatientResponse
from clinic_ledger.schemas.payment_method import PaymentMethodCreate, PaymentMethodResponse
from clinic_ledger.schemas.percentage_tier import PercentageTierCreate, PercentageTierResponse
from clinic_ledger.schemas.service_record import (
    DiscountInput,
    EntryResultResponse,
    PaymentInput,
    PendingPaymentCreate,
    PendingPaymentResultResponse,
    PendingServiceGroup,
    RecordDeleteRequest,
    ServiceEntryCreate,
    ServiceRecordResponse,
)
from clinic_ledger.schemas.settlement import (
    SettlementReportLineResponse,
    SettlementReportResponse,
    SettlementRunRequest,
)
from clinic_ledger.schemas.site import SiteCreate, SiteResponse

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AssistantCreate",
    "AssistantResponse",
    "CashDrawerResponse",
    "CashDrawerUpdate",
    "CatalogServiceCreate",
    "CatalogServiceResponse",
    "DiscountInput",
    "DoctorCreate",
    "DoctorResponse",
    "EntryResultResponse",
    "PatientCreate",
    "PatientResponse",
    "PaymentInput",
    "PaymentMethodCreate",
    "PaymentMethodResponse",
    "PendingPaymentCreate",
    "PendingPaymentResultResponse",
    "PendingServiceGroup",
    "PercentageTierCreate",
    "PercentageTierResponse",
    "RecordDeleteRequest",
    "ServiceEntryCreate",
    "ServiceRecordResponse",
    "SettlementReportLineResponse",
    "SettlementReportResponse",
    "SettlementRunRequest",
    "SiteCreate",
    "SiteResponse",
]
