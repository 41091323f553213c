"""Watchlist management commands for PriceWatch CLI.

Handles adding, removing and listing tracked symbols and setting
advisory price levels on them.
"""

from decimal import Decimal
from typing import Optional

import click
from rich.markup import escape
from rich.table import Table

from pricewatch.cli.common import (
    DECIMAL,
    console,
    default_user_id,
    error_panel,
    get_watchlist_cache,
)
from pricewatch.models import WatchlistResult
from pricewatch.monitor.watchlist import format_change, format_watch_price

user_option = click.option(
    "--user", "user_id", type=int, default=None, help="Owner of the watchlist."
)


def _resolve_user(user_id: Optional[int]) -> int:
    return user_id if user_id is not None else default_user_id()


def _report(result: WatchlistResult) -> None:
    """Print a successful result, or an error panel and exit."""
    if not result.ok:
        error_panel(result.message, title="Watchlist")
    console.print(f"[green]✓ {result.message}[/green]")


@click.group()
def watch() -> None:
    """Manage your watchlist.

    Track up to 25 symbols across crypto, stocks and forex.
    Prices are refreshed when you view the list.

    \b
    Examples:
      pricewatch watch add BTC --label "long term"
      pricewatch watch list
      pricewatch watch alert BTC --above 70000 --below 60000
      pricewatch watch remove BTC
    """
    pass


@watch.command("add")
@click.argument("symbol")
@click.option("--label", default=None, help="Optional note for this symbol.")
@user_option
def add_symbol(symbol: str, label: Optional[str], user_id: Optional[int]) -> None:
    """Add a symbol to your watchlist (re-adding updates it)."""
    result = get_watchlist_cache().add(_resolve_user(user_id), symbol, label)
    _report(result)
    item = result.item
    if item is not None:
        price = format_watch_price(item.last_price) if item.last_price is not None else "N/A"
        console.print(f"  {item.market_type.icon} {item.symbol} ({item.market_type.value}) — {price}")


@watch.command("remove")
@click.argument("symbol")
@user_option
def remove_symbol(symbol: str, user_id: Optional[int]) -> None:
    """Remove a symbol from your watchlist."""
    result = get_watchlist_cache().remove(_resolve_user(user_id), symbol)
    if not result.ok:
        console.print(f"[yellow]{result.message}[/yellow]")
        return
    console.print(f"[green]✓ {result.message}[/green]")


@watch.command("list")
@click.option("--no-refresh", is_flag=True, help="Show cached prices without refreshing.")
@click.option("--plain", is_flag=True, help="Print the message text instead of a table.")
@user_option
def list_watchlist(no_refresh: bool, plain: bool, user_id: Optional[int]) -> None:
    """Display your watchlist with current prices."""
    from pricewatch.monitor.watchlist import format_watchlist_message

    cache = get_watchlist_cache()
    items = cache.get(_resolve_user(user_id), refresh=not no_refresh)

    if plain or not items:
        console.print(format_watchlist_message(items, cache.max_items), markup=False)
        return

    table = Table(
        title=f"Watchlist ({len(items)}/{cache.max_items})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Market", width=8)
    table.add_column("Symbol", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Levels")
    table.add_column("Label", style="dim")
    table.add_column("Checked", style="dim")

    for item in items:
        levels = []
        if item.alert_above is not None:
            levels.append(f"↑{item.alert_above}")
        if item.alert_below is not None:
            levels.append(f"↓{item.alert_below}")
        checked = item.last_checked_at.strftime("%H:%M:%S") if item.last_checked_at else "never"

        table.add_row(
            f"{item.market_type.icon} {item.market_type.value}",
            escape(item.symbol),
            format_watch_price(item.last_price) if item.last_price is not None else "N/A",
            format_change(item.price_change_24h),
            " | ".join(levels),
            escape(item.label or ""),
            checked,
        )

    console.print(table)


@watch.command("alert")
@click.argument("symbol")
@click.option("--above", type=DECIMAL, default=None, help="Upper price level.")
@click.option("--below", type=DECIMAL, default=None, help="Lower price level.")
@user_option
def set_levels(
    symbol: str, above: Optional[Decimal], below: Optional[Decimal], user_id: Optional[int]
) -> None:
    """Set advisory price levels on a watchlist symbol.

    Omitting both levels clears them.
    """
    _report(get_watchlist_cache().set_alert(_resolve_user(user_id), symbol, above, below))
