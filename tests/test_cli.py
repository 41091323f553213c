"""Smoke tests for the PriceWatch CLI."""

from decimal import Decimal
from pathlib import Path

import pytest
from click.testing import CliRunner

from pricewatch.cli.main import cli
from pricewatch.db.store import DataStore


@pytest.fixture
def env(tmp_path: Path, monkeypatch):
    """Config file pointing at a temporary database."""
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    db_path = tmp_path / "cli.db"
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f'[database]\npath = "{db_path.as_posix()}"\n\n'
        "[monitor]\nuser_id = 5\n\n"
        "[watchlist]\nmax_items = 2\n"
    )
    return config_path, db_path


def _invoke(config_path: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(config_path), *args])


class TestAlertCommands:
    def test_alert_then_monitor_once(self, env):
        config_path, db_path = env

        result = _invoke(config_path, "quote", "BTC", "50001")
        assert result.exit_code == 0, result.output

        result = _invoke(config_path, "alert", "btc", "above", "50000")
        assert result.exit_code == 0, result.output
        assert "Alert Created" in result.output

        result = _invoke(config_path, "monitor", "--once")
        assert result.exit_code == 0, result.output
        assert "1 triggered" in result.output
        assert "went above" in result.output

        alert = DataStore(db_path).get_alerts()[0]
        assert alert.user_id == 5
        assert alert.is_triggered

        result = _invoke(config_path, "monitor", "--once")
        assert "0 triggered" in result.output

    def test_alert_rejects_bad_target(self, env):
        config_path, _ = env
        for target in ["abc", "-5", "0"]:
            result = _invoke(config_path, "alert", "BTC", "above", target)
            assert result.exit_code != 0

    def test_alert_rejects_unknown_condition(self, env):
        config_path, _ = env
        result = _invoke(config_path, "alert", "BTC", "sideways", "5")
        assert result.exit_code != 0

    def test_list_and_remove(self, env):
        config_path, db_path = env
        _invoke(config_path, "alert", "AAPL", "below", "150")
        alert_id = DataStore(db_path).get_alerts()[0].id

        result = _invoke(config_path, "alerts")
        assert result.exit_code == 0
        assert "AAPL" in result.output

        result = _invoke(config_path, "alerts", "--remove", str(alert_id))
        assert result.exit_code == 0
        assert DataStore(db_path).get_alerts() == []

    def test_monitor_reports_unavailable_symbol(self, env):
        config_path, _ = env
        _invoke(config_path, "alert", "ETH", "above", "1")

        result = _invoke(config_path, "monitor", "--once")
        assert result.exit_code == 0
        assert "No price for: ETH" in result.output

    def test_stats(self, env):
        config_path, _ = env
        _invoke(config_path, "alert", "BTC", "above", "1")
        result = _invoke(config_path, "stats")
        assert result.exit_code == 0
        assert "Active Alerts:   1" in result.output


class TestWatchCommands:
    def test_add_and_list(self, env):
        config_path, db_path = env
        _invoke(config_path, "quote", "ETH", "3000", "--change", "-1.5")

        result = _invoke(config_path, "watch", "add", "eth", "--label", "core")
        assert result.exit_code == 0, result.output
        assert "Added ETH" in result.output

        result = _invoke(config_path, "watch", "list", "--plain")
        assert result.exit_code == 0
        assert "`ETH`" in result.output
        assert "$3000.00" in result.output

        item = DataStore(db_path).get_watchlist_item(5, "ETH")
        assert item.last_price == Decimal("3000")

    def test_capacity_error_exits_nonzero(self, env):
        config_path, _ = env
        _invoke(config_path, "watch", "add", "BTC")
        _invoke(config_path, "watch", "add", "ETH")

        result = _invoke(config_path, "watch", "add", "SOL")
        assert result.exit_code == 1
        assert "limit reached" in result.output

    def test_levels_require_membership(self, env):
        config_path, _ = env
        result = _invoke(config_path, "watch", "alert", "TSLA", "--above", "300")
        assert result.exit_code == 1

    def test_table_renders_labels_literally(self, env):
        config_path, _ = env
        _invoke(config_path, "watch", "add", "BTC", "--label", "[/x] [bold]")

        result = _invoke(config_path, "watch", "list")
        assert result.exit_code == 0, result.output
        assert "[/x]" in result.output

    def test_remove_missing_is_not_an_error(self, env):
        config_path, _ = env
        result = _invoke(config_path, "watch", "remove", "BTC")
        assert result.exit_code == 0
        assert "not in your watchlist" in result.output


class TestLogging:
    def test_unknown_log_level_does_not_break_commands(self, env):
        config_path, _ = env
        with open(config_path, "a") as f:
            f.write('\n[logging]\nlevel = "verbose"\n')

        result = _invoke(config_path, "init")
        assert result.exit_code == 0, result.output
        assert "already exists" in result.output


class TestInit:
    def test_init_writes_config(self, tmp_path: Path):
        config_path = tmp_path / "new" / "config.toml"
        result = CliRunner().invoke(cli, ["--config", str(config_path), "init"])

        assert result.exit_code == 0
        assert config_path.exists()
