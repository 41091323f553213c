"""Alert monitoring and watchlist services for PriceWatch."""

from pricewatch.monitor.alert_monitor import AlertMonitor, group_by_symbol
from pricewatch.monitor.conditions import evaluate_condition, parse_condition
from pricewatch.monitor.dispatcher import NotificationDispatcher, format_trigger_message
from pricewatch.monitor.watchlist import (
    MAX_WATCHLIST_ITEMS,
    WatchlistCache,
    format_watchlist_message,
)

__all__ = [
    "AlertMonitor",
    "MAX_WATCHLIST_ITEMS",
    "NotificationDispatcher",
    "WatchlistCache",
    "evaluate_condition",
    "format_trigger_message",
    "format_watchlist_message",
    "group_by_symbol",
    "parse_condition",
]
