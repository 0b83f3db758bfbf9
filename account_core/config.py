"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class AccountConfig(BaseSettings):
    """Account core configuration"""

    # Database configuration
    database_url: str = "sqlite:///accounts.db"  # memory:// for in-process only

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Business rules configuration
    max_accounts_per_user: int = 10
    account_number_length: int = 10
    first_account_number: int = 0
    min_use_amount: int = 10
    max_use_amount: int = 1_000_000_000
    cancel_window_days: int = 365

    # Concurrency configuration
    lock_wait_seconds: float = 1.0
    lock_retry_attempts: int = 3

    class Config:
        env_prefix = "ACCOUNT_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = AccountConfig()


def get_config() -> AccountConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> AccountConfig:
    """Reload configuration from environment"""
    global config
    config = AccountConfig()
    return config
