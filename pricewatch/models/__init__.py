"""Data models for PriceWatch."""

from pricewatch.models.alert import Alert, AlertCondition, AlertStats
from pricewatch.models.market import MarketType, PriceData
from pricewatch.models.watchlist import WatchlistItem
from pricewatch.models.outcome import (
    AlertOutcome,
    DeliveryResult,
    MarkResult,
    MonitorReport,
    WatchlistResult,
    WatchlistStatus,
)

__all__ = [
    "Alert",
    "AlertCondition",
    "AlertOutcome",
    "AlertStats",
    "DeliveryResult",
    "MarkResult",
    "MarketType",
    "MonitorReport",
    "PriceData",
    "WatchlistItem",
    "WatchlistResult",
    "WatchlistStatus",
]
