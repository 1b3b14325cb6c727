"""
Core settings and environment variables for Civix Dispatch.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civix Dispatch"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Admin console and reporter app origins, comma separated
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://localhost:8081"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # In-memory store for local development without Firebase credentials
    USE_MOCK_DB: bool = False
    SEED_FILE: Optional[str] = "db_seed.json"  # Roster loaded into the in-memory store at startup

    # External classification model
    AI_ENABLED: bool = True  # If False, keyword classification only
    AI_PROVIDER: str = "gemini"  # "gemini" or "openai"
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-pro"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    AI_TIMEOUT_SECONDS: float = 5.0  # Hard deadline for the external call

    # Assignment policy
    AUTO_ASSIGN_CONFIDENCE_THRESHOLD: float = 0.9
    KEYWORD_CLASSIFICATION_CONFIDENCE: float = 0.5
    EXTERNAL_MODEL_CONFIDENCE: float = 0.6
    NOTIFY_ON_AUTO_ASSIGNMENT: bool = False  # Audit record for auto-assignments

    # Admin inbox
    NOTIFICATION_CAPACITY: int = 100
    NOTIFICATION_RETENTION_DAYS: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
