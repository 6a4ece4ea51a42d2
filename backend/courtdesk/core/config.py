# courtdesk/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Courtdesk"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DB_CONNECT_TIMEOUT_SECONDS: int = 5
    DB_AUTO_CREATE: bool = True

    # JWT Authentication
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480  # 8 hours
    BCRYPT_ROUNDS: int = 12

    # CORS
    CORS_ORIGINS: str = '["http://localhost:3000"]'

    # Reports
    REPORT_TIMEZONE: str = "UTC"

    # Live notification channel
    WS_PING_INTERVAL_SECONDS: float = 25.0
    WS_PING_TIMEOUT_SECONDS: float = 60.0
    NOTIFICATION_QUEUE_SIZE: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("REPORT_TIMEZONE")
    @classmethod
    def check_report_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            origins = json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        if isinstance(origins, str):
            return [origins]
        return list(origins)

    @property
    def report_tz(self) -> ZoneInfo:
        return ZoneInfo(self.REPORT_TIMEZONE)


def get_settings() -> Settings:
    return Settings()
