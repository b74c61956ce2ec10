"""Configuration management for the chemical formula toolkit."""
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Parsing
    strict_elements: bool = Field(
        default=True,
        description="Reject unrecognized element codes instead of mapping them to NONE"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=False)
    max_batch_size: int = Field(default=100)

    # Conversion cache
    cache_size: int = Field(default=1024)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    log_file: str = Field(default="")

    # Views offered by the conversion service
    supported_views: List[str] = [
        "composition",
        "molar",
        "weight_percent",
        "molar_percent",
        "molecular_weight"
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
