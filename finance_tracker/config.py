"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./finance_tracker.db"

    # Service
    service_name: str = "finance-tracker"
    log_level: str = "INFO"

    # Budgets
    default_currency: str = "KRW"
    default_warning_threshold: float = 80.0

    # Recurring templates
    upcoming_window_days: int = 7

    # Analytics
    trend_months: int = 6

    # Listing
    history_limit: int = 50


settings = Settings()
