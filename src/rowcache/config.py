from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ROWCACHE_", env_file=".env", extra="ignore")

    # Record store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rowcache.db",
        validation_alias="DATABASE_URL",
    )

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")

    # Cache defaults (per-wrapper options override these)
    key_prefix: str = Field(default="rowcache", validation_alias="ROWCACHE_KEY_PREFIX")
    default_expire: float = Field(default=60.0, validation_alias="ROWCACHE_DEFAULT_EXPIRE")
    default_expiry_deviation: float = Field(
        default=0.05, validation_alias="ROWCACHE_DEFAULT_EXPIRY_DEVIATION"
    )
    cache_disabled: bool = Field(default=False, validation_alias="ROWCACHE_CACHE_DISABLED")

    # Observability
    enable_metrics: bool = Field(default=True, validation_alias="ROWCACHE_ENABLE_METRICS")
    log_level: str = "INFO"
    log_json: bool = True


settings = Settings()
