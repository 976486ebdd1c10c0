from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=5000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")
    s3_access_key: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    s3_secret_key: str | None = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    s3_region: str | None = Field(default=None, alias="AWS_REGION")
    s3_bucket_name: str = Field(default="file-gateway", alias="S3_BUCKET_NAME")

    max_upload_size: int = Field(default=10 * 1024 * 1024, gt=0, alias="MAX_UPLOAD_SIZE")
    list_max_keys: int = Field(default=1000, gt=0, le=1000, alias="LIST_MAX_KEYS")
    signed_url_default_expires: int = Field(
        default=3600, gt=0, alias="SIGNED_URL_DEFAULT_EXPIRES"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
