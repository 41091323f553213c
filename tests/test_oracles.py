"""Tests for symbol classification and the paper oracle."""

from decimal import Decimal

import pytest

from pricewatch.models import MarketType
from pricewatch.oracles import PaperPriceOracle, classify_symbol


class TestClassifySymbol:
    @pytest.mark.parametrize(
        "symbol,expected",
        [
            ("BTC", MarketType.CRYPTO),
            ("eth", MarketType.CRYPTO),
            ("BTCUSDT", MarketType.CRYPTO),
            ("SOLUSDC", MarketType.CRYPTO),
            ("ETHBTC", MarketType.CRYPTO),
            ("SOMELONGTOKEN", MarketType.CRYPTO),
            ("AAPL", MarketType.STOCK),
            ("TSLA", MarketType.STOCK),
            ("F", MarketType.STOCK),
            ("EURUSD", MarketType.FOREX),
            ("usdjpy", MarketType.FOREX),
            ("XAUUSD", MarketType.FOREX),
            ("EUR", MarketType.FOREX),
            ("", MarketType.UNKNOWN),
            ("   ", MarketType.UNKNOWN),
        ],
    )
    def test_classification(self, symbol, expected):
        assert classify_symbol(symbol) == expected

    def test_oracle_classify_delegates(self, temp_db):
        assert PaperPriceOracle(temp_db).classify("GBPUSD") == MarketType.FOREX


class TestPaperPriceOracle:
    def test_reads_recorded_quotes(self, temp_db):
        temp_db.save_quote("BTC", Decimal("64000"), Decimal("1.5"))
        oracle = PaperPriceOracle(temp_db)

        assert oracle.current_price("btc") == Decimal("64000")
        data = oracle.universal_price_data("BTC")
        assert data.price == Decimal("64000")
        assert data.change_24h == Decimal("1.5")

    def test_missing_quote_is_unavailable(self, temp_db):
        oracle = PaperPriceOracle(temp_db)
        assert oracle.current_price("NOPE") is None
        assert oracle.universal_price_data("NOPE") is None

    def test_latest_quote_wins(self, temp_db):
        temp_db.save_quote("AAPL", Decimal("180"))
        temp_db.save_quote("AAPL", Decimal("181.25"))
        assert PaperPriceOracle(temp_db).current_price("AAPL") == Decimal("181.25")
