"""Paper quote commands for PriceWatch CLI.

The CLI prices symbols from recorded paper quotes. Use this command to
record or inspect them.
"""

from decimal import Decimal
from typing import Optional

import click

from pricewatch.cli.common import DECIMAL, SIGNED_DECIMAL, console, get_data_store


@click.command("quote")
@click.argument("symbol")
@click.argument("price", type=DECIMAL, required=False)
@click.option("--change", type=SIGNED_DECIMAL, default=None, help="24h change in percent.")
def quote(symbol: str, price: Optional[Decimal], change: Optional[Decimal]) -> None:
    """Record or show the paper quote for SYMBOL.

    \b
    Examples:
      pricewatch quote BTC 64250.5 --change 2.4
      pricewatch quote BTC
    """
    from pricewatch.oracles.classify import classify_symbol

    store = get_data_store()

    if price is not None:
        store.save_quote(symbol, price, change)
        console.print(f"[green]✓ Recorded {symbol.strip().upper()} at {price}[/green]")
        return

    data = store.get_quote(symbol)
    if data is None:
        console.print(f"[yellow]No quote recorded for {symbol.strip().upper()}[/yellow]")
        return

    market = classify_symbol(data.symbol)
    change_str = f"{data.change_24h:+.2f}%" if data.change_24h is not None else "N/A"
    console.print(f"{market.icon} [bold]{data.symbol}[/bold] {data.price} ({change_str})")
