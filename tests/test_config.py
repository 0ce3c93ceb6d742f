import pytest

from geoproximity.core import config

_ENV_VARS = (
    "NOMINATIM_URL",
    "GEOCODER_USER_AGENT",
    "GEOCODER_TIMEOUT",
    "GEOCODER_ZOOM",
    "GEOCODER_ACCEPT_LANGUAGE",
    "NEARBY_MAX_DISTANCE_KM",
    "PORT",
    "SERVER_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_get_settings_defaults():
    settings = config.get_settings()

    assert settings.nominatim_url == "https://nominatim.openstreetmap.org/reverse"
    assert settings.user_agent == "GeoProximity/1.0"
    assert settings.request_timeout == 10.0
    assert settings.zoom == 18
    assert settings.accept_language is None
    assert settings.max_distance_km == 50.0
    assert settings.server_port == 8080


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("NOMINATIM_URL", "http://localhost:8088/reverse")
    monkeypatch.setenv("GEOCODER_USER_AGENT", "GearUp-App/1.0")
    monkeypatch.setenv("GEOCODER_TIMEOUT", "2.5")
    monkeypatch.setenv("GEOCODER_ZOOM", "16")
    monkeypatch.setenv("GEOCODER_ACCEPT_LANGUAGE", "ar,en")
    monkeypatch.setenv("NEARBY_MAX_DISTANCE_KM", "10")
    monkeypatch.setenv("PORT", "9100")

    settings = config.get_settings()

    assert settings.nominatim_url == "http://localhost:8088/reverse"
    assert settings.user_agent == "GearUp-App/1.0"
    assert settings.request_timeout == 2.5
    assert settings.zoom == 16
    assert settings.accept_language == "ar,en"
    assert settings.max_distance_km == 10.0
    assert settings.server_port == 9100


def test_get_settings_is_cached(monkeypatch):
    first = config.get_settings()
    monkeypatch.setenv("GEOCODER_ZOOM", "10")
    assert config.get_settings() is first


def test_get_settings_rejects_malformed_numbers(monkeypatch):
    monkeypatch.setenv("GEOCODER_TIMEOUT", "soon")
    with pytest.raises(config.ConfigError):
        config.get_settings()


def test_get_settings_rejects_negative_radius(monkeypatch):
    monkeypatch.setenv("NEARBY_MAX_DISTANCE_KM", "-1")
    with pytest.raises(config.ConfigError):
        config.get_settings()


def test_get_settings_warns_on_blank_user_agent(monkeypatch, caplog):
    monkeypatch.setenv("GEOCODER_USER_AGENT", "  ")

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert settings.user_agent == ""
    assert "GEOCODER_USER_AGENT is empty" in " ".join(caplog.messages)
