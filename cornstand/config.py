"""Process-wide configuration for the corn stand service."""
from functools import lru_cache

from pydantic import AnyUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WINDOW_SECONDS = 60
PURCHASE_RETENTION_SECONDS = 60 * 60 * 24 * 30


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Bob's Corn"
    app_env: str = Field(default="development")
    redis_url: AnyUrl | None = Field(default=None)
    redis_socket_timeout_seconds: float = Field(default=2.0, gt=0)
    purchase_window_seconds: int = Field(default=DEFAULT_WINDOW_SECONDS, gt=0)
    purchase_retention_seconds: int = Field(default=PURCHASE_RETENTION_SECONDS, gt=0)
    key_prefix: str = Field(default="corn", min_length=1)
    cors_origins: str = "*"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @field_validator("redis_url", mode="before")
    @classmethod
    def _blank_url_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
