"""
PayBox application settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/paybox.db"

    # Session tokens issued by the identity provider
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Files
    DATA_DIR: str = "./data"

    # Organization
    ORG_NAME: str = "EEMERSON SAC"
    ORG_TAX_ID: str = "20523380347"
    TIMEZONE: str = "America/Lima"

    # Vision model (OpenAI-compatible chat completions)
    LLM_BASE_URL: str = "https://api.openai.com/v1"
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 1000
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Attachments
    MAX_ATTACHMENTS: int = 4
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    PDF_RENDER_SCALE: float = 2.0

    # Blob storage (S3 compatible)
    STORAGE_ENDPOINT: str = "localhost:9000"
    STORAGE_ACCESS_KEY: str = ""
    STORAGE_SECRET_KEY: str = ""
    STORAGE_SECURE: bool = False
    STORAGE_BUCKET: str = "comprobantes"
    STORAGE_PUBLIC_URL: str = "http://localhost:9000"

    # Navitel GPS
    NAVITEL_API_BASE: str = "https://control.navitelgps.com/api-v2"
    NAVITEL_PUBLIC_HOST: str = "https://control.navitelgps.com"
    NAVITEL_LOGIN: str = ""
    NAVITEL_PASSWORD: str = ""
    NAVITEL_TOKEN_TTL_SECONDS: int = 30 * 60
    NAVITEL_LINK_HOURS: int = 6
    NAVITEL_TIMEOUT_SECONDS: float = 20.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
