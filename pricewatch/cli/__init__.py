"""CLI commands for PriceWatch.

This package provides the command-line interface for PriceWatch,
including alert management, the alert monitor, watchlists and quotes.
"""

from pricewatch.cli.main import cli, main

__all__ = ["cli", "main"]
