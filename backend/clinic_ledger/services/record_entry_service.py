"""Service entry: registering services for a patient and paying open records."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_ledger.core.config import settings
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.exceptions import (
    AuthorizationError,
    CashDrawerUpdateError,
    ConflictError,
    NotFoundError,
    UpstreamFailure,
    ValidationError,
)
from clinic_ledger.models.catalog_service import PriceList
from clinic_ledger.models.patient import Patient
from clinic_ledger.models.payment_method import PaymentMethod, PaymentMethodKind
from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.models.site import Site
from clinic_ledger.repositories.account_repository import AccountRepository
from clinic_ledger.repositories.catalog_service_repository import CatalogServiceRepository
from clinic_ledger.repositories.patient_repository import PatientRepository
from clinic_ledger.repositories.payment_method_repository import PaymentMethodRepository
from clinic_ledger.repositories.service_record_repository import ServiceRecordRepository
from clinic_ledger.repositories.site_repository import SiteRepository
from clinic_ledger.schemas.service_record import (
    PaymentInput,
    PendingPaymentCreate,
    ServiceEntryCreate,
)
from clinic_ledger.services.cash_drawer_service import CashDrawerService
from clinic_ledger.services.payment_ledger import (
    LedgerState,
    amount_to_charge,
    apply_payment,
    cash_received,
)
from clinic_ledger.services.pending_balance import resolve_pending
from clinic_ledger.services.valuation import Discount, Valuation, valuate_new_services

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

OWN_PATIENT_TIER = 2
DEFAULT_TIER = 1


@dataclass(frozen=True)
class PaymentChannel:
    """A resolved payment or deposit: method, nominal amount and channel details."""

    method: PaymentMethod
    kind: PaymentMethodKind
    amount: Decimal
    account_id: UUID | None = None
    credit_holder: str | None = None
    credit_amount: Decimal | None = None

    @property
    def to_charge(self) -> Decimal:
        return amount_to_charge(self.amount, self.kind)

    @property
    def cash(self) -> Decimal:
        return cash_received(self.amount, self.kind)


@dataclass
class EntryResult:
    """Outcome of registering services for a patient."""

    records: list[ServiceRecord]
    valuation: Valuation
    payment_to_charge: Decimal = ZERO
    deposit_to_charge: Decimal = ZERO
    credit_added: Decimal = ZERO
    cash_drawer_adjustment: Decimal = ZERO
    cash_drawer_error: str | None = None


@dataclass
class PendingPaymentResult:
    """Outcome of paying an open record."""

    record: ServiceRecord
    is_fully_paid: bool
    amount_to_charge: Decimal
    credit_added: Decimal = ZERO
    cash_drawer_adjustment: Decimal = ZERO
    cash_drawer_error: str | None = None


@dataclass
class _Pool:
    """An amount spread over entry lines, first line first."""

    remaining: Decimal

    def take(self, up_to: Decimal) -> Decimal:
        share = min(self.remaining, max(ZERO, up_to))
        self.remaining -= share
        return share


class RecordEntryService:
    """Registers services rendered at the front desk and the payments taken."""

    def __init__(self, db: Session):
        self.db = db
        self.site_repo = SiteRepository(db)
        self.record_repo = ServiceRecordRepository(db)
        self.patient_repo = PatientRepository(db)
        self.catalog_repo = CatalogServiceRepository(db)
        self.method_repo = PaymentMethodRepository(db)
        self.account_repo = AccountRepository(db)

    def _require_site(self, ctx: RequestContext) -> Site:
        if ctx.site_id is None:
            raise ValidationError("Select a site first")
        site = self.site_repo.get_by_id(ctx.site_id)
        if not site:
            raise NotFoundError(f"Site {ctx.site_id} not found")
        return site

    def _require_site_id(self, ctx: RequestContext) -> UUID:
        return self._require_site(ctx).id  # type: ignore[return-value]

    def resolve_channel(
        self, payment: PaymentInput, site_id: UUID, label: str = "payment"
    ) -> PaymentChannel:
        """Look up a payment method and check the details its kind requires."""
        method = self.method_repo.get_by_name(payment.method)
        if not method:
            raise NotFoundError(f"Payment method '{payment.method}' not found")
        kind = method.method_kind

        if payment.amount <= 0:
            raise ValidationError(f"Enter the {label} amount for {method.name}")

        if kind.requires_account_selection:
            if payment.account_id is None:
                raise ValidationError(f"Select the account that received the {label}")
            if not self.account_repo.get_by_id(payment.account_id, site_id):
                raise NotFoundError(f"Account {payment.account_id} not found")

        if kind.requires_credit_holder:
            if not payment.credit_amount or not (payment.credit_holder or "").strip():
                raise ValidationError(f"Enter the lent amount and the credit holder for the {label}")

        return PaymentChannel(
            method=method,
            kind=kind,
            amount=payment.amount,
            account_id=payment.account_id if kind.requires_account_selection else None,
            credit_holder=payment.credit_holder if kind.requires_credit_holder else None,
            credit_amount=payment.credit_amount if kind.requires_credit_holder else None,
        )

    def _validate_services(self, data: ServiceEntryCreate) -> list[str]:
        names = [name.strip() for name in data.service_names if name and name.strip()]
        if not names:
            raise ValidationError("Select at least one service")
        if len(names) > settings.MAX_SERVICES_PER_ENTRY:
            raise ValidationError(
                f"At most {settings.MAX_SERVICES_PER_ENTRY} services can be registered at once"
            )
        if data.is_assistant:
            not_allowed = [n for n in names if n not in settings.ASSISTANT_ALLOWED_SERVICES]
            if not_allowed:
                raise ValidationError(
                    f"Assistants cannot register: {', '.join(sorted(set(not_allowed)))}"
                )
        return names

    def register_services(self, ctx: RequestContext, data: ServiceEntryCreate) -> EntryResult:
        """Register one patient visit.

        Credit, discount, deposit and payment are spread over the selected
        services in that order, first service first. A service that
        continues an open record updates that record. Anything paid beyond
        the total outstanding is credited to the patient.
        """
        site = self._require_site(ctx)
        site_id: UUID = site.id  # type: ignore[assignment]
        names = self._validate_services(data)

        payment = self.resolve_channel(data.payment, site_id) if data.payment else None
        deposit = (
            self.resolve_channel(data.deposit, site_id, label="deposit") if data.deposit else None
        )

        price_list = (
            PriceList.STADIUM
            if data.use_stadium_prices and site.has_stadium_prices
            else PriceList.STANDARD
        )
        catalog = self.catalog_repo.get_price_map(price_list)

        doc_id = data.patient_doc_id.strip()
        patient = self.patient_repo.get_by_doc_id(doc_id)
        open_records = self.record_repo.get_open_by_patient(site_id, doc_id)
        credit_balance = Decimal(str(patient.credit_balance or 0)) if patient else ZERO

        valuation = valuate_new_services(
            names,
            catalog,
            open_records,
            credit_balance=credit_balance,
            discount=(
                Discount(data.discount.value, data.discount.is_percentage)
                if data.discount
                else None
            ),
            surcharge=payment is not None and payment.kind.applies_surcharge,
        )

        tier_id = data.percentage_tier_id or (
            OWN_PATIENT_TIER if data.is_own_patient else DEFAULT_TIER
        )

        credit_pool = _Pool(valuation.credit_applied)
        discount_pool = _Pool(valuation.discount_applied)
        deposit_pool = _Pool(deposit.amount if deposit else ZERO)
        payment_pool = _Pool(payment.amount if payment else ZERO)

        records = []
        for line in valuation.lines:
            record = line.continued_record
            if record is None:
                record = ServiceRecord(
                    site_id=site_id,
                    practitioner_name=data.practitioner_name,
                    is_assistant=data.is_assistant,
                    patient_name=data.patient_name,
                    patient_doc_id=doc_id,
                    service_name=line.service_name,
                    billed_total=line.billed_total,
                    credit_used=ZERO,
                    discount=ZERO,
                    percentage_tier_id=tier_id,
                    is_own_patient=data.is_own_patient,
                    start_date=data.entry_date,
                    notes=data.notes,
                    version=1,
                )
                state = LedgerState(outstanding=line.outstanding)
            else:
                state = LedgerState.of(record)

            credit_share = credit_pool.take(state.outstanding)
            discount_share = discount_pool.take(state.outstanding - credit_share)
            state = replace(state, outstanding=state.outstanding - credit_share - discount_share)

            fields: dict = {
                "credit_used": Decimal(str(record.credit_used or 0)) + credit_share,
                "discount": Decimal(str(record.discount or 0)) + discount_share,
            }
            if line.is_continuation and data.notes:
                fields["notes"] = data.notes

            deposit_share = deposit_pool.take(state.outstanding)
            if deposit is not None and deposit_share > 0:
                state = apply_payment(
                    state, deposit_share, deposit.kind, data.entry_date, as_deposit=True
                ).state
                fields.update(
                    deposit_method_id=deposit.method.id,
                    deposit_account_id=deposit.account_id,
                )
            payment_share = payment_pool.take(state.outstanding)
            if payment is not None and payment_share > 0:
                state = apply_payment(state, payment_share, payment.kind, data.entry_date).state
                fields.update(
                    payment_method_id=payment.method.id,
                    payment_account_id=payment.account_id,
                    credit_holder=payment.credit_holder,
                    credit_amount=payment.credit_amount,
                )

            if state.outstanding == 0 and state.is_open:
                state = replace(state, completion_date=data.entry_date)

            if line.is_continuation:
                self.record_repo.apply_ledger_update(record, state, **fields)
            else:
                self.record_repo.write_ledger_state(record, state, **fields)
            records.append(record)

        credit_added = deposit_pool.remaining + payment_pool.remaining
        if patient is None:
            patient = Patient(name=data.patient_name, doc_id=doc_id)
        self.patient_repo.set_credit_balance(
            patient, credit_balance - valuation.credit_applied + credit_added
        )

        try:
            records = self.record_repo.save_all(records, patient)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to register services for patient %s", data.patient_doc_id)
            raise UpstreamFailure(f"Could not save service records: {e}") from e

        logger.info(
            "Registered %d service(s) for patient %s at site %s (%d continued)",
            len(records),
            patient.doc_id,
            site_id,
            sum(1 for line in valuation.lines if line.is_continuation),
        )
        if credit_added > 0:
            logger.info("Credited %s to patient %s", credit_added, patient.doc_id)

        result = EntryResult(
            records=records,
            valuation=valuation,
            payment_to_charge=payment.to_charge if payment else ZERO,
            deposit_to_charge=deposit.to_charge if deposit else ZERO,
            credit_added=credit_added,
        )
        cash = (payment.cash if payment else ZERO) + (deposit.cash if deposit else ZERO)
        result.cash_drawer_adjustment, result.cash_drawer_error = self._adjust_cash_drawer(
            site_id, cash
        )
        return result

    def settle_pending(self, ctx: RequestContext, data: PendingPaymentCreate) -> PendingPaymentResult:
        """Pay (fully or partially) an open record picked from the pending list."""
        site_id = self._require_site_id(ctx)

        record = self.record_repo.get_by_id(data.record_id, site_id)
        if not record:
            raise NotFoundError(f"Service record {data.record_id} not found")
        if data.expected_version is not None and record.version != data.expected_version:
            raise ConflictError(
                f"Service record {record.id} was modified (version {record.version}, "
                f"expected {data.expected_version})"
            )
        if not record.is_open:
            raise ConflictError(f"Service record {record.id} is already closed")
        if not data.payment_method:
            raise ValidationError("Select a payment method")

        channel = self.resolve_channel(
            PaymentInput(
                method=data.payment_method,
                amount=data.amount,
                account_id=data.account_id,
                credit_amount=data.credit_amount,
                credit_holder=data.credit_holder,
            ),
            site_id,
        )

        outcome = apply_payment(record, channel.amount, channel.kind, data.payment_date)
        self.record_repo.apply_ledger_update(
            record,
            outcome.state,
            payment_method_id=channel.method.id,
            payment_account_id=channel.account_id,
            credit_holder=channel.credit_holder,
            credit_amount=channel.credit_amount,
        )

        extra: list[Patient] = []
        if outcome.overpayment > 0:
            patient = self.patient_repo.get_or_build(
                str(record.patient_doc_id), str(record.patient_name)
            )
            self.patient_repo.set_credit_balance(
                patient, Decimal(str(patient.credit_balance or 0)) + outcome.overpayment
            )
            extra.append(patient)

        try:
            self.record_repo.save_all([record], *extra)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to record payment for service record %s", record.id)
            raise UpstreamFailure(f"Could not save payment: {e}") from e

        logger.info(
            "Payment of %s applied to service record %s (fully paid: %s)",
            outcome.nominal_amount,
            record.id,
            outcome.is_fully_paid,
        )

        result = PendingPaymentResult(
            record=record,
            is_fully_paid=outcome.is_fully_paid,
            amount_to_charge=outcome.amount_to_charge,
            credit_added=outcome.overpayment,
        )
        result.cash_drawer_adjustment, result.cash_drawer_error = self._adjust_cash_drawer(
            site_id, channel.cash
        )
        return result

    def _adjust_cash_drawer(self, site_id: UUID, amount: Decimal) -> tuple[Decimal, str | None]:
        """Add cash to the drawer once the ledger is committed.

        A failure here does not undo the ledger update. It is logged and
        returned so the caller can report it.
        """
        if amount <= 0:
            return ZERO, None
        try:
            CashDrawerService(self.db).increment(site_id, amount)
        except CashDrawerUpdateError as e:
            logger.error("Ledger saved but cash drawer not updated: %s", e)
            return ZERO, str(e)
        return amount, None

    def list_records(
        self,
        ctx: RequestContext,
        on_date: date | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ServiceRecord]:
        """Records of the selected site, optionally for a single day."""
        site_id = self._require_site_id(ctx)
        return self.record_repo.get_all(site_id, on_date=on_date, skip=skip, limit=limit)

    def list_pending(self, ctx: RequestContext, patient_doc_id: str) -> dict[str, list[ServiceRecord]]:
        """Open records of a patient grouped by service name."""
        site_id = self._require_site_id(ctx)
        doc_id = patient_doc_id.strip()
        if not doc_id:
            return {}
        return resolve_pending(self.record_repo.get_by_patient(site_id, doc_id), doc_id)

    def delete_records(self, ctx: RequestContext, record_ids: Sequence[UUID]) -> int:
        """Bulk delete records of the selected site. Admins and owners only."""
        if not ctx.is_admin:
            raise AuthorizationError("Only an admin or owner can delete records")
        site_id = self._require_site_id(ctx)
        if not record_ids:
            raise ValidationError("Select at least one record to delete")

        try:
            deleted = self.record_repo.delete_many(record_ids, site_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to delete service records at site %s", site_id)
            raise UpstreamFailure(f"Could not delete service records: {e}") from e

        logger.info("%s deleted %d service record(s) at site %s", ctx.username, deleted, site_id)
        return deleted
