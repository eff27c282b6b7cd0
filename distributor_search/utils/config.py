"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Mustek (CSV over HTTP, static customer token)
    mustek_api_url: str = "https://api.mustek.co.za/Customer/ItemsStock.ashx"
    mustek_api_token: Optional[str] = None

    # Axiz (OAuth2 client credentials, JSON search API)
    axiz_api_base_url: str = "https://demo.com"
    axiz_client_id: Optional[str] = None
    axiz_client_secret: Optional[str] = None
    axiz_token_endpoint: Optional[str] = None
    axiz_scope: str = (
        "axiz-api.customers axiz-api.erppricelist axiz-api.internalpricelist "
        "axiz-api.markets axiz-api.salesordertracking"
    )

    # Tarsus (bearer token JSON feed)
    tarsus_api_url: str = "https://feedgen.tarsusonline.co.za/api/DataFeed/Customer-ProductCatalogue"
    tarsus_api_token: Optional[str] = None

    # Database
    database_url: str = "sqlite:///./distributor_search.db"

    # Redis (sync locks)
    redis_url: str = "redis://localhost:6379/0"
    cache_enabled: bool = True

    # Search
    search_source: str = "live"  # Options: "live" (fan out to suppliers), "database"
    catalog_cache_enabled: bool = True
    catalog_cache_ttl: int = 0  # seconds, 0 keeps the snapshot until invalidated
    catalog_cache_partial_ttl: int = 60  # seconds a snapshot missing a failed supplier is kept
    supplier_search_timeout: float = 0.0  # 0 uses each connector's own deadline

    # Sync
    sync_interval_hours: float = 4.0
    sync_lock_timeout_minutes: int = 30

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/app.log"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    # Environment Configuration
    environment: str = "development"  # development, staging, production
    production_mode: bool = False  # Auto-detected from environment

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.production_mode = (
            self.environment.lower() == "production" or
            self.environment.lower() == "prod"
        )

        # More restrictive logging in production
        if self.production_mode and self.log_level == "INFO":
            self.log_level = "WARNING"

    @property
    def dev_mode(self) -> bool:
        """Live supplier search without a synced database."""
        return self.search_source.lower() != "database"


settings = Settings()
