"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./wealthblend.db"

    # Service
    service_name: str = "wealthblend-api"
    environment: str = "development"  # development | production
    log_level: str = "INFO"

    # CORS
    cors_allowed_origins: List[str] = [
        "https://1wealthblend.com",
        "https://www.1wealthblend.com",
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    # Budget alerts
    alert_webhook_url: str = "http://localhost:8002/budget-alerts"
    alert_suppression_hours: int = 24

    # Estate plans
    review_interval_years: int = 1

    # HTTP Client
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
