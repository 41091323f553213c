"""Tests for notification transports."""

from unittest.mock import MagicMock

import pytest
import requests
from rich.console import Console

from pricewatch.transports import ConsoleTransport, TelegramConfig, TelegramTransport


def _response(status_code=200, body=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    response.text = "error body"
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body if body is not None else {"ok": True}
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.post.return_value = _response()
    return session


class TestTelegramTransport:
    def test_posts_send_message(self, session):
        transport = TelegramTransport(TelegramConfig(bot_token="abc", timeout=7.5), session)

        result = transport.send(42, "*hello*")

        assert result.ok
        session.post.assert_called_once_with(
            "https://api.telegram.org/botabc/sendMessage",
            json={
                "chat_id": 42,
                "text": "*hello*",
                "parse_mode": "Markdown",
                "disable_web_page_preview": True,
            },
            timeout=7.5,
        )

    def test_long_messages_are_truncated(self, session):
        config = TelegramConfig(bot_token="abc", max_message_length=20)
        TelegramTransport(config, session).send(1, "x" * 50)

        text = session.post.call_args.kwargs["json"]["text"]
        assert len(text) == 20
        assert text.endswith("...")

    def test_request_exception_is_a_failed_delivery(self, session):
        session.post.side_effect = requests.ConnectionError("unreachable")
        result = TelegramTransport(TelegramConfig(bot_token="abc"), session).send(1, "hi")

        assert not result.ok
        assert "unreachable" in result.error

    @pytest.mark.parametrize(
        "response,error",
        [
            (_response(status_code=403), "HTTP 403"),
            (_response(json_error=True), "invalid JSON"),
            (_response(body={"ok": False, "description": "chat not found"}), "chat not found"),
        ],
    )
    def test_api_failures(self, session, response, error):
        session.post.return_value = response
        result = TelegramTransport(TelegramConfig(bot_token="abc"), session).send(1, "hi")

        assert not result.ok
        assert error in result.error

    def test_dry_run_does_not_post(self, session):
        transport = TelegramTransport(TelegramConfig(bot_token="", dry_run=True), session)
        assert transport.send(1, "hi").ok
        session.post.assert_not_called()

    def test_token_required_outside_dry_run(self):
        with pytest.raises(ValueError):
            TelegramTransport(TelegramConfig(bot_token=""))

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")
        transport = TelegramTransport.from_env(timeout=3)
        assert transport.config.bot_token == "env-token"
        assert transport.config.timeout == 3

    def test_from_env_without_token(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        assert TelegramTransport.from_env() is None


class TestConsoleTransport:
    def test_prints_panel(self):
        console = Console(record=True, width=80)
        result = ConsoleTransport(console).send(9, "BTC went above your target!")

        assert result.ok
        output = console.export_text()
        assert "user 9" in output
        assert "BTC went above your target!" in output
