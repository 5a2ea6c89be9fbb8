import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

MEMORY_URL = "memory://"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Backing stores (read-only)
    org_data_url: str = os.getenv("ORG_DATA_URL", "redis://localhost:6379/0")
    org_cache_url: str = os.getenv("ORG_CACHE_URL", "redis://localhost:6379/1")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    org_list_key: str = os.getenv("ORG_LIST_KEY", "org_list")

    # Aggregate cache
    aggregate_cache_url: str = os.getenv("AGGREGATE_CACHE_URL", "redis://localhost:6379/2")
    cache_key: str = os.getenv("CACHE_KEY", "org_overview:data.json")
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour default
    coalesce_rebuilds: bool = os.getenv("COALESCE_REBUILDS", "false").lower() == "true"

    # Fan-out
    fetch_concurrency: int = int(os.getenv("FETCH_CONCURRENCY", "0"))  # 0 = unbounded
    lookup_timeout_seconds: float = float(os.getenv("LOOKUP_TIMEOUT_SECONDS", "0"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def uses_memory_cache(self) -> bool:
        """Check if the aggregate cache should live in process memory.

        Returns:
            True if AGGREGATE_CACHE_URL selects the in-process cache
        """
        return self.aggregate_cache_url == MEMORY_URL

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError(f"CACHE_TTL must be positive, got {self.cache_ttl}")

        if self.fetch_concurrency < 0:
            raise ValueError(
                f"FETCH_CONCURRENCY must be 0 (unbounded) or positive, got {self.fetch_concurrency}"
            )

        if self.lookup_timeout_seconds < 0:
            raise ValueError("LOOKUP_TIMEOUT_SECONDS must not be negative")

        if not self.org_list_key:
            raise ValueError("ORG_LIST_KEY must not be empty")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_redis_client(url: str) -> redis.Redis:
    """Create an asyncio Redis client for one of the configured URLs."""
    return redis.from_url(
        url,
        password=settings.redis_password,
        decode_responses=True,
    )
