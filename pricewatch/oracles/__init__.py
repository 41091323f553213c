"""Price oracles for PriceWatch."""

from pricewatch.oracles.base import PriceOracle
from pricewatch.oracles.classify import classify_symbol
from pricewatch.oracles.paper import PaperPriceOracle

__all__ = [
    "PaperPriceOracle",
    "PriceOracle",
    "classify_symbol",
]
