from pydantic_settings import BaseSettings, SettingsConfigDict


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
    debug: bool = True

    # Application
    app_name: str = "URL Shortener Microservice"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # URL Shortener specific
    base_url: str = "http://127.0.0.1:8000"
    short_url_length: int = 6
    max_retries: int = 10

    # Short code generation strategy
    short_code_strategy: str = "uniform"  # Options: "uniform", "byte_modulo"

    # Expiry window (minutes)
    default_validity_minutes: int = 30
    max_validity_minutes: int = 10080  # One week

    # In-memory store
    store_shards: int = 64
    cleanup_interval_seconds: int = 60  # 0 disables the sweeper

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
