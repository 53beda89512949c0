"""Tests for settings loading."""

from voicetask.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GOOGLE_MAPS_API_KEY", "GOOGLE_PLACES_API_KEY", "SENTRY_DSN", "USER_TIMEZONE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.user_timezone == "America/New_York"
        assert settings.default_radius_m == 150
        assert settings.base_confidence == 0.7
        assert settings.maps_timeout_seconds == 10.0
        assert settings.has_google_maps is False
        assert settings.has_sentry is False

    def test_maps_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
        settings = Settings(_env_file=None)
        assert settings.google_maps_api_key == "maps-key"
        assert settings.has_google_maps is True

    def test_places_key_alias(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "places-key")
        assert Settings(_env_file=None).google_maps_api_key == "places-key"

    def test_sentry_from_env(self, monkeypatch):
        monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example/1")
        monkeypatch.setenv("SENTRY_ENVIRONMENT", "staging")
        settings = Settings(_env_file=None)
        assert settings.has_sentry is True
        assert settings.sentry_environment == "staging"
