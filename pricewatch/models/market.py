"""Market category and price data models."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MarketType(str, Enum):
    """Market category of a symbol."""

    CRYPTO = "crypto"
    STOCK = "stock"
    FOREX = "forex"
    UNKNOWN = "unknown"

    @property
    def icon(self) -> str:
        return _MARKET_ICONS[self]


_MARKET_ICONS = {
    MarketType.CRYPTO: "💎",
    MarketType.FOREX: "💱",
    MarketType.STOCK: "📈",
    MarketType.UNKNOWN: "📊",
}


class PriceData(BaseModel):
    """Current price with 24h change for a symbol."""

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    price: Decimal = Field(..., ge=0, description="Current price")
    change_24h: Optional[Decimal] = Field(
        default=None, description="24h change in percent"
    )

    model_config = {"frozen": True}
