"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:5000/api"
    request_timeout_seconds: float = 10.0
    token_cookie_name: str = "token"
    token_ttl_days: int = 7
    secure_cookies: bool = False
    secret_key: str = "dev-secret-key"
    foods_per_page: int = 12
    recommendation_limit: int = 12
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def token_max_age_seconds(self) -> int:
        """Lifetime of the persisted auth token in seconds."""
        return self.token_ttl_days * 24 * 60 * 60


def normalize_base_url(raw: str) -> str:
    """Strip whitespace and trailing slashes from the API base URL."""
    cleaned = raw.strip()
    while cleaned.endswith("/"):
        cleaned = cleaned[:-1]
    return cleaned
