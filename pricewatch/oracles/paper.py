"""Paper price oracle backed by recorded quotes."""

from decimal import Decimal
from typing import Optional

from pricewatch.db.store import DataStore
from pricewatch.models import PriceData
from pricewatch.oracles.base import PriceOracle


class PaperPriceOracle(PriceOracle):
    """Price oracle that serves quotes recorded in the data store.

    Quotes are written with ``DataStore.save_quote`` (or the ``quote``
    command). Symbols without a recorded quote are unavailable.
    """

    def __init__(self, data_store: DataStore):
        """Initialize the paper oracle.

        Args:
            data_store: DataStore holding the quotes table.
        """
        self._data_store = data_store

    def current_price(self, symbol: str) -> Optional[Decimal]:
        quote = self._data_store.get_quote(symbol)
        return quote.price if quote else None

    def universal_price_data(self, symbol: str) -> Optional[PriceData]:
        return self._data_store.get_quote(symbol)
