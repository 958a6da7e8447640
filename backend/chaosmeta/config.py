"""Application configuration."""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "chaosmeta"
    APP_VERSION: str = "1.0.0"

    # Target system selected when a SystemConfig is created
    DEFAULT_SYSTEM: str = "ts"

    # Registry: "override" (last write wins) or "reject"
    DUPLICATE_PROVIDER_POLICY: str = "override"

    # Directory of <system>.json analyzer dumps registered at bootstrap
    SYSTEM_DATA_DIR: str = ""

    # Views
    NON_INJECTABLE_ADDRESSES: List[str] = ["ts-rabbitmq"]
    DATABASE_SYSTEM_ALLOWLIST: List[str] = []
    PRELOAD_MAX_WORKERS: int = 8

    # Cluster inventory
    DEFAULT_LABEL_KEY: str = "app"
    APP_LABEL_KEY: str = "app"
    KUBECONFIG_PATH: str = ""
    INVENTORY_REQUEST_TIMEOUT_SECONDS: float = 10
    INVENTORY_MAX_RETRIES: int = 3

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
