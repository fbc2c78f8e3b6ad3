"""Configuration and environment settings for the job tracker."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the job tracker."""

    database_url: str = "sqlite:///jobs.db"
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    log_file: str = "logs/jobtracker.log"
    import_chunk_size: int = 50
    debtors_limit: int = 30
    preview_rows: int = 3
    default_services: str = "Window Cleaning"
    currency_symbol: str = "£"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
