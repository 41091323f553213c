"""Console transport that renders notifications in the terminal."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel

from pricewatch.models import DeliveryResult
from pricewatch.transports.base import NotificationTransport


class ConsoleTransport(NotificationTransport):
    """Prints notifications as rich panels instead of sending them."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def send(self, user_id: int, text: str) -> DeliveryResult:
        self._console.print(Panel(
            text,
            title=f"[bold]Notification → user {user_id}[/bold]",
            border_style="yellow",
        ))
        return DeliveryResult(ok=True)
