"""Tests for RecordEntryService business logic."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.core.exceptions import (
    AuthorizationError,
    CashDrawerUpdateError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from clinic_ledger.models.catalog_service import PriceList
from clinic_ledger.models.service_record import ServiceRecord
from clinic_ledger.repositories.account_repository import AccountRepository
from clinic_ledger.repositories.catalog_service_repository import CatalogServiceRepository
from clinic_ledger.repositories.patient_repository import PatientRepository
from clinic_ledger.repositories.payment_method_repository import PaymentMethodRepository
from clinic_ledger.repositories.site_repository import SiteRepository
from clinic_ledger.schemas.account import AccountCreate
from clinic_ledger.schemas.catalog_service import CatalogServiceCreate
from clinic_ledger.schemas.patient import PatientCreate
from clinic_ledger.schemas.payment_method import PaymentMethodCreate
from clinic_ledger.schemas.service_record import (
    DiscountInput,
    PaymentInput,
    PendingPaymentCreate,
    ServiceEntryCreate,
)
from clinic_ledger.services.cash_drawer_service import CashDrawerService
from clinic_ledger.services.record_entry_service import RecordEntryService
from tests.conftest import DEFAULT_SITE_ID

ENTRY_DAY = date(2024, 3, 10)


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def ctx():
    return RequestContext(site_id=DEFAULT_SITE_ID, username="recepcion", role="Recepción")


@pytest.fixture
def admin_ctx():
    return RequestContext(site_id=DEFAULT_SITE_ID, username="dueno", role="Dueño")


@pytest.fixture(autouse=True)
def catalog(db_session):
    """Seed services and payment methods."""
    repo = CatalogServiceRepository(db_session)
    for name, price in [
        ("Ortodoncia", "100000"),
        ("Resina", "40000"),
        ("Limpieza profunda", "60000"),
        ("Sesión de aclaramiento", "80000"),
    ]:
        repo.create(CatalogServiceCreate(name=name, price=Decimal(price)))
    repo.create(
        CatalogServiceCreate(name="Resina", price=Decimal("30000"), price_list=PriceList.STADIUM)
    )

    methods = PaymentMethodRepository(db_session)
    for name in ["Efectivo", "Datáfono", "Transferencia", "Crédito"]:
        methods.create(PaymentMethodCreate(name=name))


@pytest.fixture
def account(db_session):
    return AccountRepository(db_session).create(
        AccountCreate(site_id=DEFAULT_SITE_ID, name="Bancolombia Ahorros")
    )


@pytest.fixture
def service(db_session):
    return RecordEntryService(db_session)


def _entry(**overrides):
    data = {
        "practitioner_name": "Dra. Gómez",
        "patient_name": "Ana Pérez",
        "patient_doc_id": "123",
        "service_names": ["Ortodoncia"],
        "entry_date": ENTRY_DAY,
    }
    data.update(overrides)
    return ServiceEntryCreate(**data)


def _cash(amount):
    return PaymentInput(method="Efectivo", amount=Decimal(amount))


def _drawer(db_session):
    return SiteRepository(db_session).get_cash_drawer_balance(DEFAULT_SITE_ID)


class TestRegisterServices:
    """Tests for RecordEntryService.register_services()."""

    def test_partial_cash_payment(self, service, ctx, db_session):
        result = service.register_services(ctx, _entry(payment=_cash("40000")))

        assert len(result.records) == 1
        record = result.records[0]
        assert record.billed_total == Decimal("100000")
        assert record.amount_paid == Decimal("40000")
        assert record.outstanding == Decimal("60000")
        assert record.completion_date is None
        assert record.version == 1
        assert record.payment_method.name == "Efectivo"
        assert result.cash_drawer_adjustment == Decimal("40000")
        assert result.cash_drawer_error is None
        assert _drawer(db_session) == Decimal("40000")

        patient = PatientRepository(db_session).get_by_doc_id("123")
        assert patient is not None
        assert patient.credit_balance == Decimal("0")

    def test_credit_discount_and_card_surcharge(self, service, ctx, db_session):
        PatientRepository(db_session).create(
            PatientCreate(name="Ana Pérez", doc_id="123", credit_balance=Decimal("20000"))
        )

        result = service.register_services(
            ctx,
            _entry(
                discount=DiscountInput(value=Decimal("10000")),
                payment=PaymentInput(method="Datáfono", amount=Decimal("70000")),
            ),
        )

        record = result.records[0]
        assert result.valuation.credit_applied == Decimal("20000")
        assert result.valuation.discount_applied == Decimal("10000")
        assert result.valuation.net_value == Decimal("73500.00")
        assert result.payment_to_charge == Decimal("73500")
        assert record.amount_paid == Decimal("70000")
        assert record.credit_used == Decimal("20000")
        assert record.discount == Decimal("10000")
        assert record.outstanding == Decimal("0")
        assert record.completion_date == ENTRY_DAY
        assert result.cash_drawer_adjustment == Decimal("0")
        assert _drawer(db_session) == Decimal("0")
        assert PatientRepository(db_session).get_by_doc_id("123").credit_balance == Decimal("0")

    def test_no_payment_leaves_record_open(self, service, ctx):
        result = service.register_services(ctx, _entry())
        record = result.records[0]
        assert record.outstanding == Decimal("100000")
        assert record.amount_paid == Decimal("0")
        assert record.payment_method_id is None

    def test_continuation_updates_open_record(self, service, ctx, db_session):
        first = service.register_services(ctx, _entry(payment=_cash("40000"))).records[0]

        second = service.register_services(
            ctx, _entry(entry_date=date(2024, 3, 20), payment=_cash("60000"))
        )

        assert len(second.records) == 1
        record = second.records[0]
        assert record.id == first.id
        assert record.amount_paid == Decimal("100000")
        assert record.outstanding == Decimal("0")
        assert record.completion_date == date(2024, 3, 20)
        assert record.start_date == ENTRY_DAY
        assert record.version == 2
        assert db_session.query(ServiceRecord).count() == 1

    def test_closed_record_is_not_continued(self, service, ctx, db_session):
        service.register_services(ctx, _entry(payment=_cash("100000")))
        result = service.register_services(ctx, _entry(entry_date=date(2024, 4, 1)))

        assert db_session.query(ServiceRecord).count() == 2
        assert result.records[0].outstanding == Decimal("100000")

    def test_payment_fills_lines_in_order(self, service, ctx):
        result = service.register_services(
            ctx, _entry(service_names=["Ortodoncia", "Resina"], payment=_cash("120000"))
        )

        ortho, resin = result.records
        assert ortho.outstanding == Decimal("0")
        assert ortho.completion_date == ENTRY_DAY
        assert resin.amount_paid == Decimal("20000")
        assert resin.outstanding == Decimal("20000")
        assert resin.completion_date is None

    def test_overpayment_is_credited_to_patient(self, service, ctx, db_session):
        result = service.register_services(
            ctx, _entry(service_names=["Resina"], payment=_cash("50000"))
        )

        assert result.credit_added == Decimal("10000")
        assert result.records[0].outstanding == Decimal("0")
        assert PatientRepository(db_session).get_by_doc_id("123").credit_balance == Decimal(
            "10000"
        )
        assert _drawer(db_session) == Decimal("50000")

    def test_deposit_and_transfer_payment(self, service, ctx, account, db_session):
        result = service.register_services(
            ctx,
            _entry(
                deposit=_cash("30000"),
                payment=PaymentInput(
                    method="Transferencia", amount=Decimal("20000"), account_id=account.id
                ),
            ),
        )

        record = result.records[0]
        assert record.deposit == Decimal("30000")
        assert record.amount_paid == Decimal("20000")
        assert record.outstanding == Decimal("50000")
        assert record.deposit_method.name == "Efectivo"
        assert record.payment_account_id == account.id
        assert result.deposit_to_charge == Decimal("30000")
        assert _drawer(db_session) == Decimal("30000")

    def test_credit_method_keeps_holder(self, service, ctx):
        result = service.register_services(
            ctx,
            _entry(
                payment=PaymentInput(
                    method="Crédito",
                    amount=Decimal("100000"),
                    credit_amount=Decimal("100000"),
                    credit_holder="Financiera Sonría",
                )
            ),
        )
        record = result.records[0]
        assert record.credit_holder == "Financiera Sonría"
        assert record.credit_amount == Decimal("100000")
        assert record.outstanding == Decimal("0")

    def test_tier_derived_from_own_patient_flag(self, service, ctx):
        own = service.register_services(ctx, _entry(is_own_patient=True)).records[0]
        other = service.register_services(
            ctx, _entry(patient_doc_id="456", is_own_patient=False)
        ).records[0]
        explicit = service.register_services(
            ctx, _entry(patient_doc_id="789", percentage_tier_id=3)
        ).records[0]

        assert own.percentage_tier_id == 2
        assert other.percentage_tier_id == 1
        assert explicit.percentage_tier_id == 3

    def test_stadium_prices(self, service, ctx):
        result = service.register_services(
            ctx, _entry(service_names=["Resina"], use_stadium_prices=True)
        )
        assert result.records[0].billed_total == Decimal("30000")

    def test_assistant_allowed_service(self, service, ctx):
        result = service.register_services(
            ctx,
            _entry(
                practitioner_name="Laura",
                is_assistant=True,
                service_names=["Sesión de aclaramiento"],
            ),
        )
        assert result.records[0].is_assistant is True

    def test_assistant_cannot_register_other_services(self, service, ctx, db_session):
        with pytest.raises(ValidationError, match="Assistants"):
            service.register_services(
                ctx, _entry(practitioner_name="Laura", is_assistant=True)
            )
        assert db_session.query(ServiceRecord).count() == 0

    def test_too_many_services(self, service, ctx):
        with pytest.raises(ValidationError):
            service.register_services(ctx, _entry(service_names=["Resina"] * 31))

    def test_repeated_service_keeps_one_open_record(self, service, ctx, db_session):
        with pytest.raises(ValidationError, match="more than once"):
            service.register_services(ctx, _entry(service_names=["Ortodoncia", "Ortodoncia"]))
        assert db_session.query(ServiceRecord).count() == 0

        service.register_services(ctx, _entry())
        open_records = (
            db_session.query(ServiceRecord)
            .filter(
                ServiceRecord.patient_doc_id == "123",
                ServiceRecord.service_name == "Ortodoncia",
                ServiceRecord.completion_date.is_(None),
            )
            .all()
        )
        assert len(open_records) == 1

    def test_site_required(self, service):
        with pytest.raises(ValidationError):
            service.register_services(RequestContext(site_id=None), _entry())

    def test_unknown_site(self, service):
        with pytest.raises(NotFoundError):
            service.register_services(RequestContext(site_id=uuid4()), _entry())

    def test_unknown_service_stores_nothing(self, service, ctx, db_session):
        with pytest.raises(NotFoundError):
            service.register_services(ctx, _entry(service_names=["Blanqueamiento"]))
        assert db_session.query(ServiceRecord).count() == 0
        assert PatientRepository(db_session).get_by_doc_id("123") is None

    def test_unknown_payment_method(self, service, ctx):
        with pytest.raises(NotFoundError):
            service.register_services(
                ctx, _entry(payment=PaymentInput(method="Bitcoin", amount=Decimal("1")))
            )

    def test_payment_without_amount(self, service, ctx):
        with pytest.raises(ValidationError):
            service.register_services(ctx, _entry(payment=_cash("0")))

    def test_transfer_requires_account(self, service, ctx):
        with pytest.raises(ValidationError, match="account"):
            service.register_services(
                ctx,
                _entry(payment=PaymentInput(method="Transferencia", amount=Decimal("1000"))),
            )

    def test_transfer_account_must_exist(self, service, ctx):
        with pytest.raises(NotFoundError):
            service.register_services(
                ctx,
                _entry(
                    payment=PaymentInput(
                        method="Transferencia", amount=Decimal("1000"), account_id=uuid4()
                    )
                ),
            )

    def test_credit_requires_holder(self, service, ctx):
        with pytest.raises(ValidationError, match="credit holder"):
            service.register_services(
                ctx,
                _entry(payment=PaymentInput(method="Crédito", amount=Decimal("1000"))),
            )

    def test_cash_drawer_failure_is_reported(self, service, ctx, db_session, monkeypatch):
        def failing_increment(self, site_id, amount):
            raise CashDrawerUpdateError(site_id, amount, "database is locked")

        monkeypatch.setattr(CashDrawerService, "increment", failing_increment)

        result = service.register_services(ctx, _entry(payment=_cash("40000")))

        assert result.cash_drawer_error is not None
        assert "database is locked" in result.cash_drawer_error
        assert result.cash_drawer_adjustment == Decimal("0")
        assert db_session.query(ServiceRecord).count() == 1
        assert _drawer(db_session) == Decimal("0")


class TestSettlePending:
    """Tests for RecordEntryService.settle_pending()."""

    @pytest.fixture
    def open_record(self, service, ctx):
        return service.register_services(ctx, _entry(payment=_cash("40000"))).records[0]

    def _payment(self, record, amount, **kwargs):
        data = {
            "record_id": record.id,
            "amount": Decimal(amount),
            "payment_method": "Efectivo",
            "payment_date": date(2024, 3, 25),
        }
        data.update(kwargs)
        return PendingPaymentCreate(**data)

    def test_partial_payment(self, service, ctx, open_record, db_session):
        result = service.settle_pending(ctx, self._payment(open_record, "10000"))

        assert result.is_fully_paid is False
        assert result.record.outstanding == Decimal("50000")
        assert result.record.amount_paid == Decimal("50000")
        assert result.record.version == 2
        assert _drawer(db_session) == Decimal("50000")

    def test_full_payment_closes_record(self, service, ctx, open_record):
        result = service.settle_pending(ctx, self._payment(open_record, "60000"))

        assert result.is_fully_paid is True
        assert result.record.outstanding == Decimal("0")
        assert result.record.completion_date == date(2024, 3, 25)

    def test_card_payment_shows_surcharge(self, service, ctx, open_record, db_session):
        result = service.settle_pending(
            ctx, self._payment(open_record, "60000", payment_method="Datáfono")
        )

        assert result.amount_to_charge == Decimal("63000")
        assert result.record.amount_paid == Decimal("100000")
        assert result.cash_drawer_adjustment == Decimal("0")
        assert _drawer(db_session) == Decimal("40000")

    def test_overpayment_credited(self, service, ctx, open_record, db_session):
        result = service.settle_pending(ctx, self._payment(open_record, "70000"))

        assert result.credit_added == Decimal("10000")
        assert result.record.outstanding == Decimal("0")
        assert PatientRepository(db_session).get_by_doc_id("123").credit_balance == Decimal(
            "10000"
        )

    def test_expected_version_match(self, service, ctx, open_record):
        result = service.settle_pending(
            ctx, self._payment(open_record, "10000", expected_version=1)
        )
        assert result.record.version == 2

    def test_stale_version_rejected(self, service, ctx, open_record):
        service.settle_pending(ctx, self._payment(open_record, "10000", expected_version=1))

        with pytest.raises(ConflictError):
            service.settle_pending(ctx, self._payment(open_record, "10000", expected_version=1))

    def test_closed_record_rejected(self, service, ctx, open_record):
        service.settle_pending(ctx, self._payment(open_record, "60000"))

        with pytest.raises(ConflictError):
            service.settle_pending(ctx, self._payment(open_record, "1"))

    def test_unknown_record(self, service, ctx):
        with pytest.raises(NotFoundError):
            service.settle_pending(
                ctx,
                PendingPaymentCreate(
                    record_id=uuid4(),
                    amount=Decimal("1"),
                    payment_method="Efectivo",
                    payment_date=ENTRY_DAY,
                ),
            )

    def test_method_required(self, service, ctx, open_record):
        with pytest.raises(ValidationError):
            service.settle_pending(ctx, self._payment(open_record, "10000", payment_method=None))


class TestListPending:
    def test_groups_open_records(self, service, ctx):
        service.register_services(
            ctx, _entry(service_names=["Ortodoncia", "Resina"], payment=_cash("100000"))
        )

        groups = service.list_pending(ctx, "123")

        assert list(groups) == ["Resina"]
        assert groups["Resina"][0].outstanding == Decimal("40000")

    def test_nothing_owed(self, service, ctx):
        assert service.list_pending(ctx, "123") == {}
        assert service.list_pending(ctx, "  ") == {}


class TestListRecords:
    def test_filters_by_day(self, service, ctx):
        service.register_services(ctx, _entry())
        service.register_services(
            ctx, _entry(patient_doc_id="456", entry_date=date(2024, 3, 11))
        )

        records = service.list_records(ctx, on_date=date(2024, 3, 11))

        assert [r.patient_doc_id for r in records] == ["456"]
        assert len(service.list_records(ctx)) == 2


class TestDeleteRecords:
    def test_admin_can_delete(self, service, ctx, admin_ctx, db_session):
        record = service.register_services(ctx, _entry()).records[0]

        assert service.delete_records(admin_ctx, [record.id]) == 1
        assert db_session.query(ServiceRecord).count() == 0

    def test_staff_cannot_delete(self, service, ctx, db_session):
        record = service.register_services(ctx, _entry()).records[0]

        with pytest.raises(AuthorizationError):
            service.delete_records(ctx, [record.id])
        assert db_session.query(ServiceRecord).count() == 1

    def test_empty_selection(self, service, admin_ctx):
        with pytest.raises(ValidationError):
            service.delete_records(admin_ctx, [])
