from typing import List, Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Data store
    data_backend: Literal["csv"] = "csv"
    data_dir: str = "sample_data"

    # Business rules
    # Python weekday numbers (Monday=0). The stall trades on Friday and Saturday.
    operating_days: List[int] = [4, 5]
    weekly_expense_budget: int = 40000  # minor units (RM400)
    average_daily_sales_days: int = 7
    currency_symbol: str = "RM"

    # UI settings
    default_top_n: int = 5
    min_top_n: int = 3
    max_top_n: int = 15

    # Seed data settings
    default_seed_weeks: int = 6
    default_seed_value: int = 42

    @field_validator("operating_days")
    @classmethod
    def _weekdays(cls, days: List[int]) -> List[int]:
        bad = [d for d in days if not 0 <= d <= 6]
        if bad:
            raise ValueError(f"operating_days must be weekday numbers 0-6, got {bad}")
        return sorted(set(days))

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
