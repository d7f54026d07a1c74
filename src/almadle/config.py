"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    almadle_secret: str
    catalog_path: str = "data/alma_food.json"
    image_roots: list[str] = ["data/images", "public/images"]
    image_fetch_timeout: float = 10.0
    daily_timezone: str = "Europe/Brussels"
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def cookie_secure(self) -> bool:
        """Return true when session cookies must carry the Secure flag."""
        return self.environment != "local"
