"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/fincast"

    # Application
    APP_ENV: str = "development"
    API_V1_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Forecasting
    FORECAST_DEFAULT_HORIZON: int = 6
    FORECAST_MAX_HORIZON: int = 24
    FORECAST_TRAILING_WINDOW: int = 6
    FORECAST_CONFIDENCE_CEILING: float = 0.95
    FORECAST_HISTORY_MONTHS: int = 12  # How much history the service loads
    FORECAST_APPLY_SEASONALITY: bool = False
    FORECAST_DENSE_HISTORY: bool = False  # Fill months without activity with zeros

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )


settings = Settings()
