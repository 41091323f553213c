"""Shared helpers for PriceWatch CLI commands."""

from datetime import timedelta
from decimal import Decimal, InvalidOperation

import click
from rich.console import Console
from rich.panel import Panel

from pricewatch.config import Settings, load_settings

console = Console()


class DecimalType(click.ParamType):
    """Click parameter parsed as a Decimal."""

    name = "decimal"

    def __init__(self, positive: bool = True):
        self.positive = positive

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not result.is_finite():
            self.fail(f"{value!r} is not a finite number", param, ctx)
        if self.positive and result <= 0:
            self.fail(f"{value!r} must be a positive number", param, ctx)
        return result


DECIMAL = DecimalType()
SIGNED_DECIMAL = DecimalType(positive=False)


def get_settings() -> Settings:
    """Get settings loaded by the root command, or load them now."""
    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        obj = ctx.find_root().obj
        if isinstance(obj, dict) and "settings" in obj:
            return obj["settings"]
    return load_settings()


def get_data_store():
    """Get the data store instance."""
    from pricewatch.db.store import DataStore

    return DataStore(get_settings().database.path.expanduser())


def get_oracle(store):
    """Get the price oracle used by the CLI."""
    from pricewatch.oracles.paper import PaperPriceOracle

    return PaperPriceOracle(store)


def get_transport():
    """Get the notification transport.

    Uses Telegram when a bot token is configured, the console otherwise.
    """
    settings = get_settings().telegram
    if settings.bot_token or settings.dry_run:
        from pricewatch.transports.telegram import TelegramConfig, TelegramTransport

        return TelegramTransport(TelegramConfig(
            bot_token=settings.bot_token,
            timeout=settings.timeout_seconds,
            dry_run=settings.dry_run,
        ))

    from pricewatch.transports.console import ConsoleTransport

    return ConsoleTransport(console)


def get_monitor():
    """Build an AlertMonitor wired to the configured store, oracle and transport."""
    from pricewatch.monitor.alert_monitor import AlertMonitor
    from pricewatch.monitor.dispatcher import NotificationDispatcher

    store = get_data_store()
    return AlertMonitor(store, get_oracle(store), NotificationDispatcher(get_transport()))


def get_watchlist_cache():
    """Build a WatchlistCache using the configured limits."""
    from pricewatch.monitor.watchlist import WatchlistCache

    settings = get_settings().watchlist
    store = get_data_store()
    return WatchlistCache(
        store,
        get_oracle(store),
        max_items=settings.max_items,
        stale_after=timedelta(seconds=settings.stale_after_seconds),
    )


def default_user_id() -> int:
    return get_settings().monitor.user_id


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)
