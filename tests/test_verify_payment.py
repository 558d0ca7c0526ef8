from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.dependencies.payments import get_settings
from app.main import app
from app.models.novel import Novel
from app.schemas.payment_schemas import VerifyPaymentRequest
from app.services.document_store import DocumentStore
from app.services.promotion_service import verify_payment

TOLERANCE = timedelta(minutes=1)


@pytest.fixture
def configure():
    def _configure(**overrides):
        app.dependency_overrides[get_settings] = lambda: Settings(**overrides)

    return _configure


def test_successful_one_month_payment_promotes_and_records(client, gateway, novel, fetch, payments):
    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] is True
    assert body["message"] == "Payment verified and novel promoted successfully"
    assert gateway.verify_calls == ["R1"]

    book = fetch(Novel, "B1")
    assert book.is_promoted is True
    assert book.promotion_plan == "1-month"
    assert book.promotion_end_notification_sent is False
    assert abs(book.promotion_end_date - (datetime.utcnow() + timedelta(days=30))) < TOLERANCE
    assert abs(book.promotion_start_date - datetime.utcnow()) < TOLERANCE

    records = payments()
    assert len(records) == 1
    record = records[0]
    assert record.amount == 5000
    assert record.book_id == "B1"
    assert record.user_id == "U1"
    assert record.plan_id == "1-month"
    assert record.reference == "R1"
    assert record.status == "success"


def test_any_other_plan_runs_sixty_days(client, gateway, novel, fetch):
    gateway.verify_response["data"]["metadata"]["planId"] = "3-month"

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 200
    book = fetch(Novel, "B1")
    assert book.promotion_plan == "3-month"
    assert abs(book.promotion_end_date - (datetime.utcnow() + timedelta(days=60))) < TOLERANCE


def test_metadata_values_are_trimmed(client, gateway, novel, fetch, payments):
    gateway.verify_response["data"]["metadata"] = {
        "planId": " 1-month ",
        "bookId": "  B1",
        "userId": "U1 ",
    }

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 200
    assert fetch(Novel, "B1").promotion_plan == "1-month"
    record = payments()[0]
    assert (record.book_id, record.plan_id, record.user_id) == ("B1", "1-month", "U1")


def test_metadata_sent_as_json_string_is_decoded(client, gateway, novel, fetch):
    gateway.verify_response["data"]["metadata"] = (
        '{"planId": "1-month", "bookId": "B1", "userId": "U1"}'
    )

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 200
    assert fetch(Novel, "B1").is_promoted is True


@pytest.mark.parametrize("reference", [None, "", "   "])
def test_missing_reference(client, gateway, reference):
    body = {} if reference is None else {"reference": reference}

    resp = client.post("/verify-payment", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"status": False, "message": "Missing payment reference"}
    assert gateway.verify_calls == []


def test_gateway_failure_is_400(client, gateway, novel, fetch, payments):
    gateway.verify_response = {"status": False, "message": "Transaction reference not found"}

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Payment verification failed"
    assert fetch(Novel, "B1").is_promoted is False
    assert payments() == []


@pytest.mark.parametrize("status", ["pending", "failed", "abandoned"])
def test_unsuccessful_transaction_leaves_book_unchanged(client, gateway, novel, fetch, payments, status):
    gateway.verify_response["data"]["status"] = status

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400
    book = fetch(Novel, "B1")
    assert book.is_promoted is False
    assert book.promotion_end_date is None
    assert payments() == []


def test_missing_metadata(client, gateway, novel, payments):
    del gateway.verify_response["data"]["metadata"]

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Payment metadata is missing"
    assert payments() == []


@pytest.mark.parametrize("field", ["bookId", "planId", "userId"])
def test_missing_metadata_field_writes_nothing(client, gateway, novel, fetch, payments, field):
    del gateway.verify_response["data"]["metadata"][field]

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400
    assert resp.json()["message"] == f"Invalid or missing {field} in payment metadata"
    assert fetch(Novel, "B1").is_promoted is False
    assert payments() == []


@pytest.mark.parametrize("value", ["   ", 42, None])
def test_blank_or_non_string_book_id_is_invalid(client, gateway, novel, value):
    gateway.verify_response["data"]["metadata"]["bookId"] = value

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400


def test_unknown_book_is_404_and_nothing_created(client, gateway, fetch, payments):
    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 404
    assert resp.json()["message"] == "Book with ID B1 not found in database"
    assert fetch(Novel, "B1") is None
    assert payments() == []


def test_second_verification_is_a_noop_by_default(client, gateway, novel, fetch, payments):
    first = client.post("/verify-payment", json={"reference": "R1"})
    started = fetch(Novel, "B1").promotion_start_date

    second = client.post("/verify-payment", json={"reference": "R1"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["message"] == "Payment already verified"
    assert len(payments(reference="R1")) == 1
    assert fetch(Novel, "B1").promotion_start_date == started


def test_duplicate_verification_without_idempotency_records_twice(session, gateway, novel, fetch, payments):
    store = DocumentStore(session)
    config = Settings(VERIFY_IDEMPOTENT=False)
    first_at = datetime(2026, 3, 1, 9, 0)
    second_at = first_at + timedelta(days=5)

    verify_payment(request=VerifyPaymentRequest(reference="R1"), gateway=gateway,
                   store=store, settings=config, now=first_at)
    verify_payment(request=VerifyPaymentRequest(reference="R1"), gateway=gateway,
                   store=store, settings=config, now=second_at)

    assert len(payments(reference="R1")) == 2
    book = fetch(Novel, "B1")
    assert book.promotion_start_date == second_at
    assert book.promotion_end_date == second_at + timedelta(days=30)


def test_reverification_resets_notification_flag(client, gateway, session, fetch, configure):
    configure(VERIFY_IDEMPOTENT=False)
    session.add(Novel(id="B1", is_promoted=True, promotion_end_notification_sent=True))
    session.commit()

    client.post("/verify-payment", json={"reference": "R2"})

    assert fetch(Novel, "B1").promotion_end_notification_sent is False


def test_plan_outside_configured_list_is_rejected(client, gateway, novel, fetch, payments, configure):
    configure(PROMOTION_PLANS="1-month,2-month")
    gateway.verify_response["data"]["metadata"]["planId"] = "lifetime"

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid or missing planId in payment metadata"
    assert fetch(Novel, "B1").is_promoted is False
    assert payments() == []


def test_configured_plan_is_accepted(client, gateway, novel, configure):
    configure(PROMOTION_PLANS="1-month,2-month")
    gateway.verify_response["data"]["metadata"]["planId"] = "2-month"

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 200


def test_ledger_failure_rolls_back_promotion(client, gateway, novel, fetch, payments, monkeypatch):
    def failing_add(self, collection, fields):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(DocumentStore, "add", failing_add)

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 500
    assert resp.json() == {
        "status": False,
        "message": "Database operation failed. Please contact support.",
    }
    book = fetch(Novel, "B1")
    assert book.is_promoted is False
    assert book.promotion_plan is None
    assert payments() == []


def test_gateway_exception_is_internal_error(client, gateway, novel):
    def boom(reference):
        raise TimeoutError("read timed out")

    gateway.verify_transaction = boom

    resp = client.post("/verify-payment", json={"reference": "R1"})

    assert resp.status_code == 500
    assert resp.json() == {"status": False, "message": "Internal Server Error"}


def test_reference_is_trimmed_everywhere(client, gateway, novel, payments):
    first = client.post("/verify-payment", json={"reference": " R1 "})
    second = client.post("/verify-payment", json={"reference": "R1"})

    assert first.status_code == 200
    assert gateway.verify_calls == ["R1", "R1"]
    assert second.json()["message"] == "Payment already verified"
    assert [p.reference for p in payments()] == ["R1"]
