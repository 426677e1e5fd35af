from functools import lru_cache
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Funnel Automation Orchestrator"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Security
    trusted_proxy_ips: list[str] = []  # Only these peers may set X-Forwarded-For
    webhook_secret: str | None = None  # If set, inbound webhooks must be signed

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100

    # Automation engine
    engine_api_url: str = "http://localhost:5678/api/v1"
    engine_api_key: str = ""
    engine_timeout_seconds: float = 10.0

    # Validation
    recent_failure_window_minutes: int = 60
    recent_failure_threshold: int = 3

    # Trigger ingress
    default_redirect_url: str = "/thank-you"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("engine_api_url")
    @classmethod
    def validate_engine_api_url(cls, v: str) -> str:
        """Engine URL must be absolute http(s); trailing slash is dropped."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"ENGINE_API_URL must be an absolute http(s) URL, got '{v}'")
        return v.rstrip("/")

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("recent_failure_threshold")
    @classmethod
    def validate_recent_failure_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError("RECENT_FAILURE_THRESHOLD must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
