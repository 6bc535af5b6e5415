"""Application configuration.

Defines `Settings` read from environment variables and an optional `.env` file.
"""
# surveyhub/app/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Survey Hub"
    DEBUG: bool = False
    LOG_PATH: str = "logging"
    LOG_LEVEL: str = "INFO"
    SECRET_KEY: str = "change-me-in-env"
    DATABASE_URL: str = "sqlite:///./surveyhub.db"

    ACCESS_TOKEN_TTL: int = 60 * 60  # 60 minutes
    BCRYPT_ROUNDS: int = 10
    CORS_ORIGINS: List[str] = ["http://localhost:4200"]

    TRUST_FORWARDED_FOR: bool = False
    STRICT_ANSWER_VALIDATION: bool = False
    RECENT_SURVEYS_LIMIT: int = 5


settings = Settings()
