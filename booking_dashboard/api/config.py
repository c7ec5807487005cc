"""
Configuration settings for FastAPI application.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"]


class FastAPISettings(BaseSettings):
    """FastAPI application settings with environment variable loading."""

    # Application settings
    app_name: str = Field(default="Rental Calendar API", description="Application name")
    app_description: str = Field(default="Reservation calendar and iCal sync for rental properties", description="Application description")
    app_version: str = Field(default="1.0.0", description="Application version")

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8001, description="Server port")
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # API settings
    api_version: str = Field(default="v1", description="API version")
    api_prefix: str = Field(default="/api", description="API prefix")

    cors_origins: Optional[list[str]] = Field(
        default=None,
        description="Allowed CORS origins",
        validation_alias="CORS_ORIGINS"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {"extra": "ignore"}

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or return default."""
        if v is None or v == "":
            return DEFAULT_CORS_ORIGINS
        if isinstance(v, str):
            origins = [origin.strip() for origin in v.split(',') if origin.strip()]
            return origins or DEFAULT_CORS_ORIGINS
        return v


# Global settings instance
settings = FastAPISettings()
