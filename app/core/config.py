import os
from enum import StrEnum

from pydantic import AnyHttpUrl, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
    STAGING = "staging"


ENVIRONMENT = os.getenv("RENDER_ENV", Environment.DEVELOPMENT)


class InvalidSettingsError(RuntimeError):
    """Raised at startup when the environment does not match the settings schema."""


class Settings(BaseSettings):
    app_name: str = "Campus Marketplace API"
    database_url: str
    db_echo: bool = False

    # identity provider
    google_client_id: str
    google_client_secret: str
    auth_secret: str
    auth_url: AnyHttpUrl
    firebase_credentials: str = "firebase-service-account.json"

    # image host
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str

    # payment gateway
    midtrans_server_key: str
    midtrans_client_key: str
    midtrans_is_production: bool = False

    cors_origins: list[str] = ["*"]
    testing: str | None = None
    render_env: str = ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=".env" if ENVIRONMENT != Environment.PRODUCTION else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        # hosting providers hand out sync postgres urls, the app needs asyncpg
        if value.startswith("postgres://"):
            value = value.replace("postgres://", "postgresql+asyncpg://", 1)
        elif value.startswith("postgresql://"):
            value = value.replace("postgresql://", "postgresql+asyncpg://", 1)

        try:
            make_url(value)
        except ArgumentError as e:
            raise ValueError(f"invalid database url: {e}") from e
        return value

    @property
    def is_testing(self) -> bool:
        return self.testing == "1" or self.render_env == Environment.TESTING


def format_settings_errors(error: ValidationError) -> str:
    """Render every invalid field as ``FIELD: message, message``."""
    field_errors: dict[str, list[str]] = {}
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "settings"
        field_errors.setdefault(field.upper(), []).append(err["msg"])

    lines = [f"{field}: {', '.join(messages)}" for field, messages in field_errors.items()]
    return "invalid env:\n" + "\n".join(lines)


def parse_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise InvalidSettingsError(format_settings_errors(e)) from e


config = parse_settings()
