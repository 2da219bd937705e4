import pytest

from catalog.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("MAX_UPLOAD_MB", "5")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ASSET_API_URL", "http://assets.local:9100/")

    settings = config.get_settings()

    assert settings.port == 9100
    assert settings.max_upload_mb == 5
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.seed_sample_data is False
    assert settings.log_level == "DEBUG"
    assert settings.api_url == "http://assets.local:9100"


def test_get_settings_defaults(monkeypatch):
    for name in ("PORT", "MAX_UPLOAD_MB", "SEED_SAMPLE_DATA", "LOG_LEVEL", "ASSET_API_URL"):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_settings()

    assert settings.port == 8080
    assert settings.max_upload_mb == 50
    assert settings.seed_sample_data is True
    assert settings.api_url == "http://localhost:8080"


def test_get_settings_warns_on_bad_numbers(monkeypatch, caplog):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("MAX_UPLOAD_MB", "-1")

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    messages = " ".join(caplog.messages)
    assert "PORT='eighty' is not an integer" in messages
    assert "MAX_UPLOAD_MB must be positive" in messages
    assert settings.port == 8080
    assert settings.max_upload_mb == 50
