"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from GOCARDLESS_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="GOCARDLESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote API
    api_base: str = "https://bankaccountdata.gocardless.com"
    institutions_country: str = "gb"
    user_language: str = "EN"
    access_valid_for_days: int = 30

    # Credentials, only read by the demo scripts
    secret_id: Optional[SecretStr] = None
    secret_key: Optional[SecretStr] = None

    # Service
    service_name: str = "gocardless-client"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
