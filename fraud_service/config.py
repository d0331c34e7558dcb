"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "fraud-service"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 7002

    # Shared secret expected in the X-API-Key header
    api_key: str = ""

    transaction_service_url: str = "http://transaction-service:7000"
    transaction_service_timeout_seconds: float = 5.0

    evaluation_timeout_seconds: float = 5.0

    # Fixed-window limit applied per API key on /fraud routes
    rate_limit_max_requests: int = 5
    rate_limit_window_seconds: int = 1

    # Empty means the in-process limiter is used
    redis_url: str = ""

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()


def get_settings() -> Settings:
    return settings
