"""Tests for the service record, patient and cash drawer endpoints."""

from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from clinic_ledger.core.database import get_db
from clinic_ledger.main import app
from clinic_ledger.repositories.catalog_service_repository import CatalogServiceRepository
from clinic_ledger.repositories.patient_repository import PatientRepository
from clinic_ledger.repositories.payment_method_repository import PaymentMethodRepository
from clinic_ledger.schemas.catalog_service import CatalogServiceCreate
from clinic_ledger.schemas.patient import PatientCreate
from clinic_ledger.schemas.payment_method import PaymentMethodCreate


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


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


@pytest.fixture(autouse=True)
def catalog(db_session):
    services = CatalogServiceRepository(db_session)
    services.create(CatalogServiceCreate(name="Ortodoncia", price=Decimal("100000")))
    services.create(CatalogServiceCreate(name="Resina", price=Decimal("40000")))
    methods = PaymentMethodRepository(db_session)
    methods.create(PaymentMethodCreate(name="Efectivo"))
    methods.create(PaymentMethodCreate(name="Datáfono"))


def _entry(**overrides):
    data = {
        "practitioner_name": "Dra. Gómez",
        "patient_name": "Ana Pérez",
        "patient_doc_id": "123",
        "service_names": ["Ortodoncia"],
        "entry_date": "2024-03-10",
    }
    data.update(overrides)
    return data


class TestRegisterServicesApi:
    """Tests for POST /v1/records/."""

    def test_register_with_card_payment(self, client, staff_headers):
        response = client.post(
            "/v1/records/",
            json=_entry(payment={"method": "Datáfono", "amount": "40000"}),
            headers=staff_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert len(data["records"]) == 1
        assert Decimal(data["records"][0]["outstanding"]) == Decimal("60000")
        assert Decimal(data["payment_to_charge"]) == Decimal("42000")
        assert Decimal(data["net_value"]) == Decimal("105000")
        assert Decimal(data["cash_drawer_adjustment"]) == Decimal("0")
        assert data["cash_drawer_error"] is None

    def test_missing_site_header(self, client):
        response = client.post("/v1/records/", json=_entry())
        assert response.status_code == 400
        assert response.json()["detail"] == "Select a site first"

    def test_unknown_service(self, client, staff_headers):
        response = client.post(
            "/v1/records/", json=_entry(service_names=["Blanqueamiento"]), headers=staff_headers
        )
        assert response.status_code == 404

    def test_schema_validation(self, client, staff_headers):
        response = client.post(
            "/v1/records/", json=_entry(patient_doc_id=""), headers=staff_headers
        )
        assert response.status_code == 422

    def test_list_by_day(self, client, staff_headers):
        client.post("/v1/records/", json=_entry(), headers=staff_headers)
        client.post(
            "/v1/records/",
            json=_entry(patient_doc_id="456", entry_date="2024-03-11"),
            headers=staff_headers,
        )

        response = client.get("/v1/records/?on_date=2024-03-11", headers=staff_headers)

        assert response.status_code == 200
        assert [r["patient_doc_id"] for r in response.json()] == ["456"]
        assert response.headers["X-Total-Count"] == "2"

    def test_get_record(self, client, staff_headers):
        created = client.post("/v1/records/", json=_entry(), headers=staff_headers).json()
        record_id = created["records"][0]["id"]

        response = client.get(f"/v1/records/{record_id}", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["service_name"] == "Ortodoncia"

        assert client.get(f"/v1/records/{uuid4()}", headers=staff_headers).status_code == 404


class TestPendingApi:
    """Tests for the pending view and pending payments."""

    def test_pending_then_pay(self, client, staff_headers):
        client.post(
            "/v1/records/",
            json=_entry(
                service_names=["Ortodoncia", "Resina"],
                payment={"method": "Efectivo", "amount": "100000"},
            ),
            headers=staff_headers,
        )

        pending = client.get("/v1/records/pending/123", headers=staff_headers)
        assert pending.status_code == 200
        groups = pending.json()
        assert [g["service_name"] for g in groups] == ["Resina"]
        assert Decimal(groups[0]["outstanding"]) == Decimal("40000")
        record = groups[0]["records"][0]

        paid = client.post(
            "/v1/records/pending/payments",
            json={
                "record_id": record["id"],
                "amount": "40000",
                "payment_method": "Efectivo",
                "payment_date": "2024-03-20",
                "expected_version": record["version"],
            },
            headers=staff_headers,
        )

        assert paid.status_code == 200
        body = paid.json()
        assert body["is_fully_paid"] is True
        assert body["record"]["completion_date"] == "2024-03-20"
        assert client.get("/v1/records/pending/123", headers=staff_headers).json() == []

        drawer = client.get("/v1/cash_drawer/", headers=staff_headers).json()
        assert Decimal(drawer["balance"]) == Decimal("140000")

    def test_stale_version_conflict(self, client, staff_headers):
        created = client.post("/v1/records/", json=_entry(), headers=staff_headers).json()
        record_id = created["records"][0]["id"]
        payment = {
            "record_id": record_id,
            "amount": "1000",
            "payment_method": "Efectivo",
            "payment_date": "2024-03-20",
            "expected_version": 1,
        }

        assert (
            client.post("/v1/records/pending/payments", json=payment, headers=staff_headers).status_code
            == 200
        )
        response = client.post("/v1/records/pending/payments", json=payment, headers=staff_headers)
        assert response.status_code == 409


class TestDeleteApi:
    def test_admin_deletes(self, client, admin_headers):
        created = client.post("/v1/records/", json=_entry(), headers=admin_headers).json()
        ids = [r["id"] for r in created["records"]]

        response = client.post("/v1/records/delete", json={"ids": ids}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": 1}

    def test_staff_forbidden(self, client, staff_headers):
        created = client.post("/v1/records/", json=_entry(), headers=staff_headers).json()
        ids = [r["id"] for r in created["records"]]

        response = client.post("/v1/records/delete", json={"ids": ids}, headers=staff_headers)
        assert response.status_code == 403


class TestPatientsApi:
    def test_search_by_prefix(self, client, staff_headers, db_session):
        repo = PatientRepository(db_session)
        repo.create(PatientCreate(name="Ana Pérez", doc_id="123", credit_balance=Decimal("5000")))
        repo.create(PatientCreate(name="Andrés Mora", doc_id="456"))
        repo.create(PatientCreate(name="Luis Ana", doc_id="789"))

        response = client.get("/v1/patients/search?q=an", headers=staff_headers)

        assert response.status_code == 200
        names = [p["name"] for p in response.json()]
        assert names == ["Ana Pérez", "Andrés Mora"]
        assert Decimal(response.json()[0]["credit_balance"]) == Decimal("5000")

    def test_query_too_short(self, client, staff_headers):
        response = client.get("/v1/patients/search?q=a", headers=staff_headers)
        assert response.status_code == 400


class TestCashDrawerApi:
    def test_owner_sets_balance(self, client, admin_headers):
        response = client.put("/v1/cash_drawer/", json={"balance": "300000"}, headers=admin_headers)

        assert response.status_code == 200
        assert Decimal(response.json()["balance"]) == Decimal("300000")

    def test_staff_cannot_set_balance(self, client, staff_headers):
        response = client.put("/v1/cash_drawer/", json={"balance": "1"}, headers=staff_headers)
        assert response.status_code == 403

    def test_negative_balance_rejected(self, client, admin_headers):
        response = client.put("/v1/cash_drawer/", json={"balance": "-5"}, headers=admin_headers)
        assert response.status_code == 422
