"""Tests for configuration loading."""

from pathlib import Path

import toml

from pricewatch.config import create_template_config, load_settings


class TestLoadSettings:
    def test_defaults_when_file_missing(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        settings = load_settings(tmp_path / "missing.toml")

        assert settings.monitor.interval_seconds == 60
        assert settings.monitor.retention_days == 7
        assert settings.watchlist.max_items == 25
        assert settings.watchlist.stale_after_seconds == 120
        assert settings.telegram.timeout_seconds == 10.0
        assert settings.telegram.bot_token == ""

    def test_partial_file_overrides_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        path = tmp_path / "config.toml"
        path.write_text(
            '[database]\npath = "/tmp/alerts.db"\n\n'
            "[monitor]\ninterval_seconds = 15\n\n"
            '[telegram]\nbot_token = "file-token"\n'
        )

        settings = load_settings(path)

        assert settings.database.path == Path("/tmp/alerts.db")
        assert settings.monitor.interval_seconds == 15
        assert settings.monitor.retention_days == 7
        assert settings.telegram.bot_token == "file-token"

    def test_unparseable_file_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[monitor]\ninterval_seconds = \"unterminated\n")

        assert load_settings(path).monitor.interval_seconds == 60

    def test_invalid_values_fall_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[monitor]\ninterval_seconds = -5\n")

        assert load_settings(path).monitor.interval_seconds == 60

    def test_env_token_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[telegram]\nbot_token = "file-token"\ndry_run = true\n')
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")

        settings = load_settings(path)

        assert settings.telegram.bot_token == "env-token"
        assert settings.telegram.dry_run is True

    def test_unknown_log_level_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text('[monitor]\ninterval_seconds = 15\n\n[logging]\nlevel = "verbose"\n')

        settings = load_settings(path)

        assert settings.logging.level == "INFO"
        assert settings.monitor.interval_seconds == 60

    def test_log_level_is_case_insensitive(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text('[logging]\nlevel = "debug"\n')

        assert load_settings(path).logging.level == "DEBUG"


class TestTemplateConfig:
    def test_template_round_trips(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        path = create_template_config(tmp_path / "nested" / "config.toml")

        assert path.exists()
        data = toml.load(path)
        assert set(data) == {"database", "monitor", "watchlist", "telegram", "logging"}
        assert load_settings(path).monitor.interval_seconds == 60
