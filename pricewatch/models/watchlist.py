"""Watchlist item data model."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from pricewatch.models.alert import normalize_symbol, utc_now
from pricewatch.models.market import MarketType

DEFAULT_STALE_AFTER = timedelta(minutes=2)


class WatchlistItem(BaseModel):
    """A symbol tracked by a user with its last known price."""

    id: Optional[int] = Field(default=None, description="Database ID")
    user_id: int = Field(..., description="Owner of the item")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    market_type: MarketType = Field(..., description="Market category at add time")
    label: Optional[str] = Field(default=None, description="User annotation")
    last_price: Optional[Decimal] = Field(default=None, description="Last known price")
    price_change_24h: Optional[Decimal] = Field(
        default=None, description="Last known 24h change in percent"
    )
    last_checked_at: Optional[datetime] = Field(
        default=None, description="Last successful price refresh"
    )
    alert_above: Optional[Decimal] = Field(
        default=None, description="Advisory upper threshold"
    )
    alert_below: Optional[Decimal] = Field(
        default=None, description="Advisory lower threshold"
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")

    model_config = {"frozen": True}

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        if isinstance(value, str):
            return normalize_symbol(value)
        return value

    def is_fresh(
        self, now: datetime, max_age: timedelta = DEFAULT_STALE_AFTER
    ) -> bool:
        """Whether the cached price is younger than ``max_age``."""
        if self.last_checked_at is None:
            return False
        return now - self.last_checked_at < max_age
