import logging

from string_analyzer.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("STORAGE_BACKEND", "DATABASE_URL", "FLAT_STORE_PATH", "LOG_LEVEL", "PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.storage_backend == "auto"
    assert settings.database_url == "sqlite:///./strings.db"
    assert settings.flat_store_path == "strings.json"
    assert settings.port == 8000


def test_storage_backend_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", " Flat ")

    assert get_settings().storage_backend == "flat"


def test_unknown_storage_backend_falls_back_to_auto(monkeypatch, caplog):
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")

    with caplog.at_level(logging.WARNING):
        settings = get_settings()

    assert settings.storage_backend == "auto"
    assert "sqlite" in caplog.text


def test_settings_model_applies_same_fallback():
    assert Settings(storage_backend="postgres").storage_backend == "auto"
