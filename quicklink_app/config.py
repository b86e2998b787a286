from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """
    
    # Environment
    environment: str = "development"
    debug: bool = False
    
    # Application
    app_name: str = "QuickLink URL Shortener"
    app_version: str = "2.1.3"
    
    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    allowed_origins: List[str] = ["*"]
    
    # Public prefix for short URLs; falls back to the request's base URL
    base_url: Optional[str] = None
    
    # Short code generation
    short_code_length: int = 6
    short_code_strategy: str = "sequential"  # Options: "random", "url-derived", "sequential"
    short_code_readable: bool = True
    max_attempts: int = 10
    reserved_shortcodes: List[str] = [
        "api", "health", "admin", "www", "app", "dashboard", "docs", "redoc",
    ]
    
    # Request limits
    default_expires_in: int = 30  # minutes
    max_expires_in: int = 365 * 24 * 60  # one year, in minutes
    url_max_length: int = 2048
    description_max_length: int = 200
    
    # Hot cache
    cache_backend: str = "memory"  # Options: "memory", "null"
    cache_capacity: int = 1000
    cache_hot_threshold: int = 5
    
    # Analytics
    analytics_max_events: int = 100
    tracking_enabled: bool = True
    
    # Expiry sweeper
    sweep_interval_seconds: float = 600
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    
    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Create settings instance
settings = Settings()
