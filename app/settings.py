from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    user_agent: str = Field(default="feedmerge/0.1", validation_alias="USER_AGENT")

    max_items: int = Field(default=100, validation_alias="MAX_ITEMS")
    cache_max_age_seconds: int = Field(
        default=600, validation_alias="CACHE_MAX_AGE_SECONDS"
    )

    feed_title: str = Field(default="Merged RSS Feed!", validation_alias="FEED_TITLE")
    feed_generator: str = Field(default="feedmerge", validation_alias="FEED_GENERATOR")

    fetch_connect_timeout: float = Field(
        default=5.0, validation_alias="FETCH_CONNECT_TIMEOUT"
    )
    fetch_read_timeout: float = Field(
        default=15.0, validation_alias="FETCH_READ_TIMEOUT"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
