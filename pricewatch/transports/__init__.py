"""Notification transports for PriceWatch."""

from pricewatch.transports.base import NotificationTransport
from pricewatch.transports.console import ConsoleTransport
from pricewatch.transports.telegram import TelegramConfig, TelegramTransport

__all__ = [
    "ConsoleTransport",
    "NotificationTransport",
    "TelegramConfig",
    "TelegramTransport",
]
