"""Base price oracle interface for PriceWatch."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from pricewatch.models import MarketType, PriceData
from pricewatch.oracles.classify import classify_symbol


class PriceOracle(ABC):
    """Abstract base class for price sources.

    Implementations wrap a market data provider. They must bound every
    network call with a timeout and report any failure as unavailable
    (``None``) instead of raising.
    """

    def classify(self, symbol: str) -> MarketType:
        """Classify a symbol into a market category.

        Args:
            symbol: Instrument symbol.

        Returns:
            MarketType of the symbol.
        """
        return classify_symbol(symbol)

    @abstractmethod
    def current_price(self, symbol: str) -> Optional[Decimal]:
        """Get the current price of a symbol.

        Args:
            symbol: Instrument symbol.

        Returns:
            Current price, or None if unavailable.
        """
        pass

    @abstractmethod
    def universal_price_data(self, symbol: str) -> Optional[PriceData]:
        """Get price and 24h change for a symbol in any market.

        Args:
            symbol: Instrument symbol.

        Returns:
            PriceData, or None if unavailable.
        """
        pass
