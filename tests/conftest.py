"""Shared test fixtures for the fraud service tests."""

import os
from datetime import UTC, datetime

import pytest

os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("TRANSACTION_SERVICE_URL", "http://transaction-service.test")

from fraud_service.domains.fraud.authority import TransactionAuthority  # noqa: E402
from fraud_service.domains.fraud.errors import TransactionNotFound  # noqa: E402
from fraud_service.domains.fraud.models import AuthoritativeTransaction  # noqa: E402
from fraud_service.domains.fraud.provider import InMemoryFraudDataProvider  # noqa: E402

NOW = datetime(2026, 1, 15, 14, 0, 0, tzinfo=UTC)


class StubAuthority(TransactionAuthority):
    """Transaction authority backed by a dict, recording every lookup."""

    def __init__(
        self,
        transactions: dict[str, AuthoritativeTransaction] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.transactions = transactions or {}
        self.error = error
        self.calls: list[str] = []

    async def get_transaction(self, reference: str) -> AuthoritativeTransaction:
        self.calls.append(reference)
        if self.error is not None:
            raise self.error
        try:
            return self.transactions[reference]
        except KeyError:
            raise TransactionNotFound(reference) from None


def make_authoritative(**kwargs) -> AuthoritativeTransaction:
    defaults = {
        "id": 1,
        "reference": "tx1",
        "merchant_id": 5,
        "customer_email": "buyer@example.com",
        "customer_id": 42,
        "amount": 1000,
        "currency": "NGN",
        "status": "pending",
        "created_at": NOW,
    }
    defaults.update(kwargs)
    return AuthoritativeTransaction(**defaults)


@pytest.fixture
def provider() -> InMemoryFraudDataProvider:
    return InMemoryFraudDataProvider()


@pytest.fixture
def authority() -> StubAuthority:
    return StubAuthority({"tx1": make_authoritative()})


@pytest.fixture
def sample_transaction() -> dict:
    return {
        "customer_id": "c1",
        "amount": 1500.0,
        "currency": "NGN",
        "origin": "suspicious_ip",
    }


@pytest.fixture
def clean_transaction() -> dict:
    return {
        "customer_id": "c2",
        "amount": 10.0,
        "currency": "NGN",
        "origin": "clean",
    }
