from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "INFO"

    # Data paths
    data_dir: str = "sample_data"

    # Statistics settings
    order_snapshot_limit: int = 1000
    leaderboard_size: int = 10
    unknown_store_name: str = "Noma'lum do'kon"
    unknown_product_name: str = "Noma'lum mahsulot"
    strict_numbers: bool = False

    # Report settings
    currency_suffix: str = "so'm"

    # Seed data settings
    default_seed_stores: int = 8
    default_seed_products: int = 120
    default_seed_users: int = 300
    default_seed_orders: int = 1500
    default_seed_days: int = 60
    default_seed_value: int = 42

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

def reset_config() -> None:
    """Drop the cached instance so the next get_config() re-reads the environment."""
    global _config
    _config = None
