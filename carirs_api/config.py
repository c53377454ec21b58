from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "CariRS API"
    host: str = "0.0.0.0"
    port: int = Field(default=4000, ge=1, le=65535)
    log_level: str = "INFO"

    cache_backend: Literal["none", "redis", "memory"] = "none"
    redis_url: str | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0
    cache_prefix: str = "carirs"
    realtime_ttl_seconds: int = Field(default=600, gt=0)
    static_ttl_seconds: int = Field(default=86400, gt=0)

    carirs_base_url: str | None = None
    request_timeout_seconds: float = 10.0
    request_max_retries: int = Field(default=0, ge=0)

    def resolved_redis_url(self) -> str:
        if self.redis_url:
            return self.redis_url
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
