"""
Configuration settings for the active-sse client.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Client settings loaded from ``ACTIVE_SSE_*`` environment variables.
    """
    model_config = SettingsConfigDict(
        env_prefix="ACTIVE_SSE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger endpoint
    base_url: str = "http://localhost:5260"

    # Transport settings
    connect_timeout: float = 10.0  # seconds
    write_timeout: float = 30.0  # seconds

    # Delivery settings
    queue_max_size: int = 0  # 0 = unbounded

    debug: bool = False


# Global settings instance
settings = Settings()
