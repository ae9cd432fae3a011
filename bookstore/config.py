# bookstore/config.py
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment driven settings (also read from .env)."""

    # Database
    database_url: str = "sqlite:///./bookstore.db"

    # Catalog paging
    default_page_size: int = 5
    max_page_size: int = 100

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8085
    cors_origins: List[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"

    # Client
    client_base_url: str = "http://127.0.0.1:8085"
    client_timeout: int = 10
    notification_seconds: float = 3.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
