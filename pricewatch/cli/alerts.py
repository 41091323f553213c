"""Alert management commands for PriceWatch CLI.

Handles creating, listing and removing alerts, running the alert
monitor, purging old triggered alerts and showing statistics.
"""

from decimal import Decimal
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from pricewatch.cli.common import (
    DECIMAL,
    console,
    default_user_id,
    error_panel,
    get_data_store,
    get_monitor,
    get_settings,
)
from pricewatch.models import Alert, AlertCondition, AlertStats, MonitorReport

CONDITION_CHOICES = [c.value for c in AlertCondition]


def _print_stats(stats: AlertStats) -> None:
    lines = [
        f"Active Alerts:   {stats.total_active}",
        f"Triggered Today: {stats.total_triggered_today}",
    ]
    if stats.by_symbol:
        lines.append("")
        lines.append("[bold]By Symbol:[/bold]")
        for symbol, count in stats.by_symbol.items():
            lines.append(f"  • {symbol}: {count}")

    console.print(Panel(
        "\n".join(lines),
        title="[bold]Alert Statistics[/bold]",
        border_style="cyan",
    ))


def _print_report(run: int, report: MonitorReport) -> None:
    status = "green" if not report.errors else "yellow"
    console.print(
        f"[{status}][Check #{run}] {report.finished_at:%Y-%m-%d %H:%M:%S} UTC — "
        f"{report.alerts_checked} alerts, {report.symbols_checked} symbols, "
        f"{len(report.triggered)} triggered[/{status}]"
    )
    if report.unavailable_symbols:
        console.print(
            f"[yellow]  No price for: {', '.join(report.unavailable_symbols)}[/yellow]"
        )
    if report.failed_deliveries:
        console.print(f"[red]  {report.failed_deliveries} notifications failed[/red]")


@click.command("alert")
@click.argument("symbol")
@click.argument("condition", type=click.Choice(CONDITION_CHOICES, case_sensitive=False))
@click.argument("target", type=DECIMAL)
@click.option("--user", "user_id", type=int, default=None, help="Owner of the alert.")
def create_alert(symbol: str, condition: str, target: Decimal, user_id: Optional[int]) -> None:
    """Create a price alert.

    SYMBOL is any crypto, stock or forex symbol (e.g., BTC, AAPL, EURUSD).
    CONDITION is one of above, below, crosses_above, crosses_below.
    TARGET is the price threshold.

    \b
    Conditions:
      above          - current price > TARGET
      below          - current price < TARGET
      crosses_above  - current price >= TARGET
      crosses_below  - current price <= TARGET

    \b
    Examples:
      pricewatch alert BTC above 65000
      pricewatch alert EURUSD crosses_below 1.05
    """
    if not symbol.strip():
        error_panel("Symbol must not be empty.")

    alert = Alert(
        user_id=user_id if user_id is not None else default_user_id(),
        symbol=symbol,
        condition=condition.lower(),
        target_value=target,
    )
    alert_id = get_data_store().save_alert(alert)

    console.print(Panel(
        f"[bold green]Alert Created[/bold green]\n\n"
        f"ID:        {alert_id}\n"
        f"Symbol:    {alert.symbol}\n"
        f"Condition: {AlertCondition(alert.condition).phrase}\n"
        f"Target:    {alert.target_value}",
        title="[bold]New Alert[/bold]",
        border_style="green",
    ))


@click.command("alerts")
@click.option("--user", "user_id", type=int, default=None, help="Only show this user's alerts.")
@click.option("--all", "show_all", is_flag=True, help="Include triggered alerts.")
@click.option(
    "--remove", "remove_id",
    type=int,
    default=None,
    help="Remove alert with specified ID.",
)
def list_alerts(user_id: Optional[int], show_all: bool, remove_id: Optional[int]) -> None:
    """Display or manage alerts.

    Shows pending alerts. Use --all to include triggered ones and
    --remove ID to delete an alert.
    """
    store = get_data_store()

    if remove_id is not None:
        alert = store.get_alert_by_id(remove_id)
        if alert is None:
            console.print(f"[yellow]Alert with ID {remove_id} not found[/yellow]")
            return

        store.delete_alert(remove_id)
        console.print(
            f"[green]✓ Removed alert {remove_id} "
            f"({alert.symbol} {alert.condition} {alert.target_value})[/green]"
        )
        return

    alerts = store.get_alerts(user_id=user_id, include_triggered=show_all)
    if not alerts:
        console.print(Panel(
            "[dim]No alerts set. Use 'pricewatch alert SYMBOL CONDITION TARGET' to create one.[/dim]",
            title="[bold]Alerts[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Alerts", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", width=6)
    table.add_column("User", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Condition")
    table.add_column("Target", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Status", justify="center")

    for alert in alerts:
        if alert.is_triggered:
            status = f"[yellow]✓ {alert.triggered_at:%Y-%m-%d %H:%M}[/yellow]"
        elif alert.is_active:
            status = "[green]●[/green]"
        else:
            status = "[dim]paused[/dim]"

        table.add_row(
            str(alert.id),
            str(alert.user_id),
            alert.symbol,
            alert.condition,
            str(alert.target_value),
            alert.created_at.strftime("%Y-%m-%d %H:%M"),
            status,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(alerts)} alerts[/dim]")


@click.command("monitor")
@click.option("--interval", type=click.IntRange(min=1), default=None, help="Seconds between checks.")
@click.option("--once", is_flag=True, help="Run a single check instead of looping.")
@click.option("--cleanup", is_flag=True, help="Purge old triggered alerts before starting.")
def monitor(interval: Optional[int], once: bool, cleanup: bool) -> None:
    """Monitor price alerts for all markets.

    \b
    Examples:
      pricewatch monitor --once
      pricewatch monitor --interval 30 --cleanup
    """
    settings = get_settings().monitor
    interval = interval or settings.interval_seconds
    alert_monitor = get_monitor()

    console.print("[bold cyan]🔔 Starting alert monitor[/bold cyan]")
    console.print("📊 Monitoring: Crypto (💎) • Forex (💱) • Stocks (📈)")

    if cleanup:
        deleted = alert_monitor.cleanup_old_alerts(settings.retention_days)
        console.print(f"[green]✓ Cleaned up {deleted} old triggered alerts[/green]")

    _print_stats(alert_monitor.get_alert_stats())

    if once:
        _print_report(1, alert_monitor.check_all_alerts())
        return

    console.print(f"⏰ Check interval: {interval} seconds (Ctrl+C to stop)\n")
    try:
        alert_monitor.run_forever(interval, on_report=_print_report)
    except KeyboardInterrupt:
        console.print("\n[dim]Monitor stopped[/dim]")


@click.command("cleanup")
@click.option("--days", type=click.IntRange(min=1), default=None, help="Retention window in days.")
def cleanup_alerts(days: Optional[int]) -> None:
    """Purge triggered alerts older than the retention window."""
    days = days or get_settings().monitor.retention_days
    deleted = get_monitor().cleanup_old_alerts(days)
    console.print(f"[green]✓ Removed {deleted} triggered alerts older than {days} days[/green]")


@click.command("stats")
def show_stats() -> None:
    """Show alert statistics."""
    _print_stats(get_monitor().get_alert_stats())
