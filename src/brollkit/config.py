"""Application configuration using Pydantic BaseSettings."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """brollkit configuration loaded from environment variables."""

    model_config = {"env_prefix": "BROLLKIT_", "env_file": ".env", "extra": "ignore"}

    # Local persistence backend
    storage_api_base: str = "http://localhost:3002"

    # Timeouts (seconds)
    health_timeout_seconds: float = 2.0
    connect_timeout_seconds: float = 5.0
    request_timeout_seconds: float = 60.0
    batch_timeout_seconds: float = 600.0
    download_timeout_seconds: float = 300.0

    # Storage served by the backend
    broll_dir: Path = Path("public/broll")
    public_url_prefix: str = "/broll"

    # API server
    server_host: str = "0.0.0.0"
    server_port: int = 3002
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Return settings instance."""
    return Settings()
