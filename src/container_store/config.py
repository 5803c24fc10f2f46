"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "test"
    mongo_username: str | None = None
    mongo_password: str | None = None
    container_collection: str = "container"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def mongo_client_options(settings: Settings) -> dict[str, str]:
    """Return credential options for the Mongo client, if configured."""
    if not settings.mongo_username or not settings.mongo_password:
        return {}
    return {
        "username": settings.mongo_username,
        "password": settings.mongo_password,
        "authSource": settings.mongo_database,
    }
