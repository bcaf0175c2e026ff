# app/config.py
from typing import List, Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):

    os.environ.setdefault("AUTH_BASE_URL", "http://172.17.0.1:8000")
    os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

    # MongoDB
    mongodb_uri: str = Field(
        ...,
        validation_alias=AliasChoices("MONGODB_URI", "mongodb_uri"),
    )
    mongodb_db: str = "videotube"
    videos_collection: str = "videos"
    users_collection: str = "users"
    mongo_timeout_ms: int = 5000

    # Storage (S3 / LocalStack)
    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None
    s3_bucket: str = "video-service-bucket"
    max_upload_mb: int = 200

    # Auth Service
    auth_base_url: str = Field(
        ...,
        validation_alias=AliasChoices("AUTH_BASE_URL", "auth_base_url"),
    )
    auth_timeout_seconds: int = Field(
        5,
        validation_alias=AliasChoices("AUTH_TIMEOUT_SECONDS", "auth_timeout_seconds"),
    )
    auth_cache_ttl_seconds: int = Field(
        30,
        validation_alias=AliasChoices("AUTH_CACHE_TTL_SECONDS", "auth_cache_ttl_seconds"),
    )

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # pydantic-settings v2
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",   # sem prefixo
        extra="ignore",
    )

settings = Settings()
