"""Symbol to market category classification."""

from pricewatch.models import MarketType

CURRENCY_CODES = frozenset({
    # Major
    "USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "NZD",
    # Asia
    "CNY", "HKD", "SGD", "INR", "KRW", "TWD", "THB", "MYR", "IDR", "PHP",
    "VND", "PKR", "BDT", "LKR", "NPR",
    # Middle East & Africa
    "SAR", "AED", "QAR", "KWD", "BHD", "OMR", "ILS", "EGP", "ZAR", "NGN",
    "KES", "GHS", "MAD",
    # Latin America
    "BRL", "MXN", "ARS", "CLP", "COP", "PEN", "UYU",
    # Europe (non-EUR)
    "NOK", "SEK", "DKK", "PLN", "CZK", "HUF", "RON", "BGN", "ISK", "TRY",
    "RUB", "UAH",
})

COMMODITY_PAIRS = frozenset({
    "XAUUSD", "XAGUSD", "XPTUSD", "XPDUSD",
    "XAUEUR", "XAGEUR", "XAUGBP", "XAUCHF",
    "BCOUSD", "WTOUSD",
})

# Quote assets that mark a symbol as a crypto trading pair
CRYPTO_QUOTE_SUFFIXES = (
    "USDT", "USDC", "BUSD", "FDUSD", "TUSD", "DAI",
    "BTC", "ETH", "BNB",
)

BARE_CRYPTO = frozenset({
    "BTC", "ETH", "SOL", "BNB", "XRP", "ADA", "DOGE", "DOT", "AVAX", "LINK",
    "MATIC", "LTC", "TRX", "ATOM", "UNI", "NEAR", "APT", "ARB", "OP", "SUI",
    "TON", "SHIB", "PEPE", "USDT", "USDC",
})


def classify_symbol(symbol: str) -> MarketType:
    """Classify a symbol as crypto, stock or forex.

    Args:
        symbol: Instrument symbol (any case).

    Returns:
        The detected MarketType; UNKNOWN only for an empty symbol.
    """
    symbol = symbol.strip().upper()
    if not symbol:
        return MarketType.UNKNOWN

    if len(symbol) == 6 and symbol.isalpha():
        if symbol[:3] in CURRENCY_CODES and symbol[3:] in CURRENCY_CODES:
            return MarketType.FOREX
    if symbol in COMMODITY_PAIRS:
        return MarketType.FOREX

    for suffix in CRYPTO_QUOTE_SUFFIXES:
        if len(symbol) > len(suffix) and symbol.endswith(suffix):
            return MarketType.CRYPTO

    if symbol in BARE_CRYPTO:
        return MarketType.CRYPTO
    if symbol in CURRENCY_CODES:
        return MarketType.FOREX

    if len(symbol) <= 5:
        return MarketType.STOCK
    return MarketType.CRYPTO
