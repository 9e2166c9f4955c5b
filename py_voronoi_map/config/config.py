from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    # Map Generation Configuration
    default_width: float = Field(default=800, description="Default map width")
    default_height: float = Field(default=600, description="Default map height")
    default_seed_count: int = Field(default=30, description="Default number of seed points")
    max_seed_count: int = Field(
        default=50000, gt=0, description="Upper sanity limit for seed points per run"
    )
    max_map_width: float = Field(default=10000, gt=0, description="Max allowed map width")
    max_map_height: float = Field(default=10000, gt=0, description="Max allowed map height")


# Instantiate singleton settings object
settings = Settings()
