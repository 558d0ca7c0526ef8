"""
Pytest configuration and fixtures.

The app runs against a shared in-memory sqlite database and a fake
Paystack gateway injected through FastAPI dependency overrides.
"""
import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYSTACK_SECRET_KEY"] = "sk_test_fake_key_for_testing"
os.environ["ALLOWED_ORIGIN"] = "http://localhost:3000,https://novels.example.com"
os.environ["PROMOTION_PLANS"] = ""
os.environ["VERIFY_IDEMPOTENT"] = "true"

import copy
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

import app.models  # noqa: F401  registers tables
from app.database import engine
from app.dependencies.payments import get_gateway
from app.main import app
from app.models.novel import Novel


INIT_SUCCESS = {
    "status": True,
    "message": "Authorization URL created",
    "data": {
        "authorization_url": "https://checkout.paystack.com/abc123",
        "access_code": "abc123",
        "reference": "R1",
    },
}

VERIFY_SUCCESS = {
    "status": True,
    "message": "Verification successful",
    "data": {
        "status": "success",
        "reference": "R1",
        "amount": 500000,
        "currency": "NGN",
        "metadata": {"planId": "1-month", "bookId": "B1", "userId": "U1"},
    },
}


class FakeGateway:
    """Stands in for PaystackClient and records every call."""

    def __init__(self):
        self.init_response: Dict[str, Any] = copy.deepcopy(INIT_SUCCESS)
        self.verify_response: Dict[str, Any] = copy.deepcopy(VERIFY_SUCCESS)
        self.init_calls: List[Dict[str, Any]] = []
        self.verify_calls: List[str] = []

    def initialize_transaction(self, payload):
        self.init_calls.append(payload)
        return self.init_response

    def verify_transaction(self, reference):
        self.verify_calls.append(reference)
        return self.verify_response


@pytest.fixture
def db_engine():
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(db_engine):
    with Session(db_engine) as s:
        yield s


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db_engine, gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def novel(session):
    book = Novel(id="B1", title="The River Between")
    session.add(book)
    session.commit()
    return book


@pytest.fixture
def fetch(db_engine):
    """Read a row through a fresh session so nothing is served from cache."""

    def _fetch(model, doc_id):
        with Session(db_engine) as s:
            return s.get(model, doc_id)

    return _fetch


@pytest.fixture
def init_payload():
    return {
        "email": "reader@example.com",
        "amount": 5000,
        "planId": "1-month",
        "bookId": "B1",
        "userId": "U1",
        "callback_url": "https://novels.example.com/promote/done",
    }


@pytest.fixture
def payments(db_engine):
    from sqlmodel import select
    from app.models.payment import PaymentRecord

    def _payments(**filters):
        with Session(db_engine) as s:
            query = select(PaymentRecord)
            for name, value in filters.items():
                query = query.where(getattr(PaymentRecord, name) == value)
            return list(s.exec(query).all())

    return _payments
