"""
org_services.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings shared by all four services.
- Select which service a process runs (`ORG_SERVICE`).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ServiceKind = Literal["department", "employee", "product", "config"]


class Settings(BaseSettings):
    """
    One settings object per process; every service reads only the fields it needs.
    """

    model_config = SettingsConfigDict(env_prefix="ORG_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service: ServiceKind = "employee"
    service_name: str = "org-services"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence (department and employee services)
    database_url: str = "sqlite+aiosqlite:///./org.db"

    # Outbound HTTP
    department_service_url: str = "http://localhost:8081"
    product_api_base_url: str = "https://fakestoreapi.com"
    http_timeout_seconds: float = 10.0

    # Kafka
    kafka_enabled: bool = False
    kafka_consumer_enabled: bool = False
    kafka_bootstrap_servers: str = "localhost:9092"

    # Caching for the /api/v2 routes
    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = Field(default="redis://localhost:6379/0", repr=False)
    cache_prefix: str = "org"
    cache_ttl_seconds: int | None = 600

    # Idempotent employee creation
    idempotency_max_entries: int = 10_000
    idempotency_ttl_seconds: int = 24 * 60 * 60

    notification_recipient: str = "admin@company.com"

    # Config server
    config_repo_dir: str = "./config-repo"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The service-specific app factories ignore fields they do not use, so a single
# env file can describe a whole local deployment.
