"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "financing-gateway"
    log_level: str = "INFO"

    # Presentation
    currency_code: str = "BRL"
    currency_locale: str = "pt_BR"

    # Extraction
    max_document_chars: int = 200_000  # Guard against pasting whole archives into the endpoint

    # Simulation
    max_term_months: int = 600  # 50 years


settings = Settings()
