"""Telegram Bot API transport."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

from pricewatch.models import DeliveryResult
from pricewatch.transports.base import NotificationTransport

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.telegram.org"


@dataclass
class TelegramConfig:
    """Configuration for the Telegram transport."""
    bot_token: str
    timeout: float = 10.0
    dry_run: bool = False
    max_message_length: int = 4000


class TelegramTransport(NotificationTransport):
    """Sends notifications through the Telegram Bot API.

    The user ID is used as the chat ID. Messages are sent with Markdown
    parse mode and truncated to the Bot API size limit.
    """

    def __init__(self, config: TelegramConfig, session: Optional[requests.Session] = None):
        """Initialize the transport.

        Args:
            config: TelegramConfig with token and limits.
            session: Optional requests session (a new one is created if omitted).
        """
        if not config.dry_run and not config.bot_token:
            raise ValueError("Telegram bot token is required (or use dry_run)")
        self.config = config
        self._session = session or requests.Session()

    @classmethod
    def from_env(cls, timeout: float = 10.0) -> Optional["TelegramTransport"]:
        """Create a transport from the TELEGRAM_BOT_TOKEN environment variable.

        Returns:
            TelegramTransport if configured, None otherwise.
        """
        bot_token = os.environ.get("TELEGRAM_BOT_TOKEN")
        if not bot_token:
            logger.warning("Telegram not configured (set TELEGRAM_BOT_TOKEN)")
            return None
        return cls(TelegramConfig(bot_token=bot_token, timeout=timeout))

    def _truncate(self, text: str) -> str:
        limit = self.config.max_message_length
        if len(text) <= limit:
            return text
        return text[: limit - 3] + "..."

    def send(self, user_id: int, text: str) -> DeliveryResult:
        text = self._truncate(text)

        if self.config.dry_run:
            logger.info("[DRY RUN] Telegram message to %s:\n%s", user_id, text)
            return DeliveryResult(ok=True)

        url = f"{API_BASE_URL}/bot{self.config.bot_token}/sendMessage"
        payload = {
            "chat_id": user_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }

        try:
            response = self._session.post(url, json=payload, timeout=self.config.timeout)
        except requests.RequestException as e:
            return DeliveryResult(ok=False, error=f"request failed: {e}")

        if response.status_code != 200:
            return DeliveryResult(
                ok=False, error=f"HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError:
            return DeliveryResult(ok=False, error="invalid JSON response")

        if not body.get("ok"):
            return DeliveryResult(ok=False, error=body.get("description", "unknown error"))
        return DeliveryResult(ok=True)
