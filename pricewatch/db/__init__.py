"""Persistence for PriceWatch."""

from pricewatch.db.store import DataStore

__all__ = ["DataStore"]
