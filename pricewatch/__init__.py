"""PriceWatch - price alert monitoring and watchlists across markets."""

__version__ = "0.1.0"
