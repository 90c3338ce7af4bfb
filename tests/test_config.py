"""Tests for environment-driven settings."""
from neowatch.config import APOD_URL, NEOWS_BASE, Settings

_VARS = [
    "NASA_API_KEY", "NEOWS_BASE_URL", "NEOWS_PROBE_URL", "NEOWS_TIMEOUT_S", "FEED_WINDOW_DAYS",
    "HEALTH_PROBE_INTERVAL_S", "ANIMATION_FPS", "ASTEROID_COUNT", "ASTEROID_SEED", "CORS_ORIGINS",
]


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in _VARS:
            monkeypatch.delenv(name, raising=False)
        s = Settings.from_env()
        assert s.nasa_api_key == "DEMO_KEY"
        assert s.neows_base_url == NEOWS_BASE
        assert s.probe_url == APOD_URL
        assert s.feed_window_days == 7
        assert s.probe_interval_s == 30.0
        assert s.asteroid_count == 15
        assert s.asteroid_seed is None
        assert "http://localhost:5173" in s.cors_origins

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("NASA_API_KEY", "abc123")
        monkeypatch.setenv("FEED_WINDOW_DAYS", "3")
        monkeypatch.setenv("ANIMATION_FPS", "30")
        monkeypatch.setenv("ASTEROID_SEED", "42")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
        s = Settings.from_env()
        assert s.nasa_api_key == "abc123"
        assert s.feed_window_days == 3
        assert s.frame_interval_s == 1 / 30
        assert s.asteroid_seed == 42
        assert s.cors_origins == ("https://a.example", "https://b.example")

    def test_blank_seed_is_unseeded(self, monkeypatch):
        monkeypatch.setenv("ASTEROID_SEED", "  ")
        assert Settings.from_env().asteroid_seed is None

    def test_zero_fps(self):
        assert Settings(animation_fps=0).frame_interval_s == 0.0
