"""Trigger message formatting and notification dispatch."""

import logging
from datetime import datetime
from decimal import Decimal

from pricewatch.models import Alert, DeliveryResult, MarketType
from pricewatch.monitor.conditions import parse_condition
from pricewatch.transports.base import NotificationTransport

logger = logging.getLogger(__name__)


def price_decimals(market_type: MarketType, price: Decimal) -> int:
    """Display precision for a price: 8 for sub-unit crypto, else 2."""
    if market_type == MarketType.CRYPTO and price < 1:
        return 8
    return 2


def format_price(value: Decimal, decimals: int) -> str:
    """Format a price with fixed decimals and no thousands separators."""
    return f"{value:.{decimals}f}"


def format_trigger_message(
    alert: Alert,
    current_price: Decimal,
    market_type: MarketType,
    triggered_at: datetime,
) -> str:
    """Render the notification text for a triggered alert.

    Args:
        alert: The alert that fired.
        current_price: Price snapshot that satisfied the condition.
        market_type: Market category of the alert's symbol.
        triggered_at: Trigger timestamp (UTC).

    Returns:
        Message text with Markdown-style markers.
    """
    target = alert.target_value
    decimals = price_decimals(market_type, current_price)

    condition = parse_condition(alert.condition)
    phrase = condition.phrase if condition else "reached"

    diff = current_price - target
    diff_percent = diff * 100 / target
    trend = "📈" if diff > 0 else "📉"

    lines = [
        "🔔 *PRICE ALERT TRIGGERED*",
        "",
        f"{market_type.icon} *{alert.symbol}* {phrase} your target!",
        "",
        f"🎯 Target: ${format_price(target, decimals)}",
        f"💰 Current: ${format_price(current_price, decimals)}",
        f"{trend} Difference: {diff:+.{decimals}f} ({diff_percent:+.2f}%)",
        "",
        f"_Alert ID: {alert.id}_",
        f"_Triggered at: {triggered_at.strftime('%Y-%m-%d %H:%M:%S')} UTC_",
    ]
    return "\n".join(lines)


class NotificationDispatcher:
    """Hands notification text to a transport.

    Transport failures are logged and returned as a failed DeliveryResult;
    they are never raised and never retried here.
    """

    def __init__(self, transport: NotificationTransport):
        self._transport = transport

    def notify(self, user_id: int, message: str) -> DeliveryResult:
        """Send a message to a user.

        Args:
            user_id: Recipient.
            message: Message text.

        Returns:
            DeliveryResult from the transport, or a failed result if the
            transport raised.
        """
        try:
            result = self._transport.send(user_id, message)
        except Exception as e:
            logger.error("Notification to user %s failed: %s", user_id, e)
            return DeliveryResult(ok=False, error=str(e))

        if not result.ok:
            logger.error("Notification to user %s failed: %s", user_id, result.error)
        return result
