"""Shared fixtures and fakes for PriceWatch tests."""

import tempfile
from collections import Counter
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytest

from pricewatch.db.store import DataStore
from pricewatch.models import DeliveryResult, PriceData
from pricewatch.oracles.base import PriceOracle
from pricewatch.transports.base import NotificationTransport


class FakeOracle(PriceOracle):
    """In-memory oracle that counts lookups per symbol."""

    def __init__(self, prices: Optional[dict] = None, changes: Optional[dict] = None):
        self.prices = {k: Decimal(str(v)) for k, v in (prices or {}).items()}
        self.changes = {k: Decimal(str(v)) for k, v in (changes or {}).items()}
        self.failing: set[str] = set()
        self.price_calls: Counter = Counter()
        self.data_calls: Counter = Counter()

    def current_price(self, symbol: str) -> Optional[Decimal]:
        self.price_calls[symbol] += 1
        if symbol in self.failing:
            raise RuntimeError(f"provider error for {symbol}")
        return self.prices.get(symbol)

    def universal_price_data(self, symbol: str) -> Optional[PriceData]:
        self.data_calls[symbol] += 1
        if symbol in self.failing:
            raise RuntimeError(f"provider error for {symbol}")
        price = self.prices.get(symbol)
        if price is None:
            return None
        return PriceData(symbol=symbol, price=price, change_24h=self.changes.get(symbol))


class RecordingTransport(NotificationTransport):
    """Transport that records messages instead of sending them."""

    def __init__(self, ok: bool = True, raises: bool = False):
        self.ok = ok
        self.raises = raises
        self.sent: list[tuple[int, str]] = []

    def send(self, user_id: int, text: str) -> DeliveryResult:
        if self.raises:
            raise ConnectionError("transport down")
        self.sent.append((user_id, text))
        if not self.ok:
            return DeliveryResult(ok=False, error="rejected")
        return DeliveryResult(ok=True)


class FixedClock:
    """Manually advanced clock."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield DataStore(Path(tmpdir) / "test.db")


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def transport():
    return RecordingTransport()
