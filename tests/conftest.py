"""Shared test fixtures: a small persona store, a per-test token service, and a client."""
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from openbank.config import Settings
from openbank.fixtures import FixtureStore
from openbank.main import create_app
from openbank.schemas import Account, PersonaData, Transaction
from openbank.services.tokens import TokenService


def _txn(txn_id: str, account_id: str, day: str, name: str, amount: float) -> Transaction:
    return Transaction(
        id=txn_id,
        account_id=account_id,
        date=date.fromisoformat(day),
        name=name,
        amount=amount,
    )


# Transactions are deliberately not sorted by date so ordering can be checked
STEADY = PersonaData(
    accounts=(
        Account(id="acc-1", name="Checking", type="depository", balance=1520.25),
        Account(id="acc-2", name="Credit Card", type="credit", balance=-310.5),
    ),
    transactions=(
        _txn("t-1", "acc-1", "2025-01-15", "Payroll", 2500.0),
        _txn("t-2", "acc-2", "2025-01-01", "Grocery Mart", -82.13),
        _txn("t-3", "acc-1", "2025-02-01", "Rent", -1200.0),
        _txn("t-4", "acc-1", "2025-01-31", "Electric Utility", -95.4),
        _txn("t-5", "acc-9", "2025-01-15", "Orphaned Refund", 12.0),
    ),
)

GIG = PersonaData(
    accounts=(
        Account(id="acc-g", name="Everyday", type="depository", balance=64.0),
    ),
    transactions=(
        _txn("g-1", "acc-g", "2025-03-03", "Delivery Payout", 140.0),
    ),
)

EMPTY = PersonaData()


@pytest.fixture
def personas() -> dict[str, PersonaData]:
    return {"steady": STEADY, "gig": GIG, "empty": EMPTY}


@pytest.fixture
def store(personas) -> FixtureStore:
    return FixtureStore(personas)


@pytest.fixture
def token_service() -> TokenService:
    """A token service with a key unique to the test."""
    return TokenService(f"test-key-{uuid.uuid4()}", ttl_seconds=3600)


@pytest.fixture
def app(store, token_service):
    test_settings = Settings(service_name="openbank-test", signing_key="unused-in-tests")
    return create_app(app_settings=test_settings, store=store, token_service=token_service)


@pytest.fixture
def client(app) -> TestClient:
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def access_token(client) -> str:
    """Access token for the steady persona obtained through the link flow."""
    response = client.post("/item/public_token/exchange", json={"public_token": "steady"})
    assert response.status_code == 200
    return response.json()["access_token"]
