"""
Centralized application configuration implementing the 12-Factor App methodology.
Values are read from environment variables or a local .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "HipotecaSim"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Any SQLAlchemy URL; PostgreSQL in production
    DATABASE_URL: str = "sqlite:///./simulador.db"

    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    LOG_LEVEL: str = "INFO"

    # Simulation engine policy
    VAN_ANNUAL_DISCOUNT_RATE: float = 0.10
    MAX_TERM_MONTHS: int = 600

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
