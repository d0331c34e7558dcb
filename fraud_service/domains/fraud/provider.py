"""Historical and reputation data consumed by data-dependent rules."""

import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

import structlog

from .models import HistoryRecord, Reputation

logger = structlog.get_logger()


class FraudDataProvider(ABC):
    """Read-side contract for fraud context data.

    Implementations raise ``DataUnavailable`` only when their backend cannot
    answer. Unknown customers, addresses and devices are not errors.
    """

    @abstractmethod
    async def transaction_history(
        self,
        customer_id: str,
        lookback: timedelta,
        now: datetime | None = None,
    ) -> list[HistoryRecord]:
        """Return the customer's records newer than ``now - lookback``."""
        ...

    @abstractmethod
    async def ip_reputation(self, address: str) -> Reputation | None:
        ...

    @abstractmethod
    async def device_reputation(self, device_id: str) -> Reputation | None:
        ...

    @abstractmethod
    async def is_flagged_channel_transaction(
        self, channel_type: str, transaction_id: str
    ) -> bool:
        ...


class InMemoryFraudDataProvider(FraudDataProvider):
    """Process-lifetime provider for development and tests.

    Seeding methods replace the stored mappings wholesale under a lock, so
    readers always see a consistent snapshot without locking themselves.
    """

    def __init__(self) -> None:
        self._write_lock = threading.Lock()
        self._transactions: MappingProxyType[str, tuple[HistoryRecord, ...]] = (
            MappingProxyType({})
        )
        self._ip_data: MappingProxyType[str, Reputation] = MappingProxyType({})
        self._device_data: MappingProxyType[str, Reputation] = MappingProxyType({})
        self._flagged_channel_txns: frozenset[tuple[str, str]] = frozenset()

    # -- read path ---------------------------------------------------------

    async def transaction_history(
        self,
        customer_id: str,
        lookback: timedelta,
        now: datetime | None = None,
    ) -> list[HistoryRecord]:
        records = self._transactions.get(customer_id, ())
        cutoff = (now or datetime.now(UTC)) - lookback
        return [r for r in records if r.timestamp > cutoff]

    async def ip_reputation(self, address: str) -> Reputation | None:
        return self._ip_data.get(address)

    async def device_reputation(self, device_id: str) -> Reputation | None:
        return self._device_data.get(device_id)

    async def is_flagged_channel_transaction(
        self, channel_type: str, transaction_id: str
    ) -> bool:
        return (channel_type, transaction_id) in self._flagged_channel_txns

    # -- seeding -----------------------------------------------------------

    def add_transaction(self, customer_id: str, record: HistoryRecord) -> None:
        with self._write_lock:
            updated = dict(self._transactions)
            updated[customer_id] = (*updated.get(customer_id, ()), record)
            self._transactions = MappingProxyType(updated)
        logger.debug("history_record_added", customer_id=customer_id)

    def add_ip_reputation(self, address: str, reputation: Reputation) -> None:
        with self._write_lock:
            self._ip_data = MappingProxyType({**self._ip_data, address: reputation})

    def add_device_reputation(self, device_id: str, reputation: Reputation) -> None:
        with self._write_lock:
            self._device_data = MappingProxyType(
                {**self._device_data, device_id: reputation}
            )

    def flag_channel_transaction(self, channel_type: str, transaction_id: str) -> None:
        with self._write_lock:
            self._flagged_channel_txns = self._flagged_channel_txns | {
                (channel_type, transaction_id)
            }
