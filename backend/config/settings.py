from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Settings
    PROJECT_NAME: str = "Polygon Edit API"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # External APIs
    # Not validated at startup: a missing token shows up as a 401 on the first call
    REPLICATE_API_TOKEN: Optional[str] = None
    REPLICATE_MODEL: str = "google/nano-banana"

    # Processing Configuration
    RESULT_FETCH_TIMEOUT: float = 60.0  # seconds


def get_settings() -> Settings:
    return Settings()
