"""Tests for environment-driven settings."""

from trackside.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TRACKSIDE_EXACTA_UNIT", raising=False)
        s = Settings(_env_file=None)
        assert s.exacta_unit == 2.0
        assert s.trifecta_unit == 1.0
        assert s.wide_open_score_band == 30.0
        assert s.value_min_odds == 4.0
        assert s.value_min_rank == 5

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TRACKSIDE_EXACTA_UNIT", "1")
        monkeypatch.setenv("TRACKSIDE_LOG_LEVEL", "DEBUG")
        s = Settings(_env_file=None)
        assert s.exacta_unit == 1.0
        assert s.log_level == "DEBUG"

    def test_non_positive_units_reset(self, monkeypatch):
        monkeypatch.setenv("TRACKSIDE_EXACTA_UNIT", "0")
        monkeypatch.setenv("TRACKSIDE_TRIFECTA_UNIT", "-1")
        s = Settings(_env_file=None)
        assert s.exacta_unit == 2.0
        assert s.trifecta_unit == 1.0

    def test_cached(self):
        assert get_settings() is get_settings()
