"""Tests for configuration helpers."""

from container_store.config import Settings, mongo_client_options


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://db.internal:27017")
    monkeypatch.setenv("MONGO_DATABASE", "inventory")
    monkeypatch.setenv("CONTAINER_COLLECTION", "containers")

    settings = Settings()

    assert settings.mongo_uri == "mongodb://db.internal:27017"
    assert settings.mongo_database == "inventory"
    assert settings.container_collection == "containers"


def test_client_options_without_credentials(settings) -> None:
    assert mongo_client_options(settings) == {}


def test_client_options_with_credentials() -> None:
    settings = Settings(
        mongo_database="inventory", mongo_username="app", mongo_password="secret"
    )

    assert mongo_client_options(settings) == {
        "username": "app",
        "password": "secret",
        "authSource": "inventory",
    }


def test_client_options_require_both_credentials() -> None:
    settings = Settings(mongo_username="app")

    assert mongo_client_options(settings) == {}
