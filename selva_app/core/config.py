"""Configuration settings for the Protocolo Selva application."""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings."""
    APP_NAME: str = "Protocolo Selva"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # File-backed SQLite so every worker process shares the same DB.
    DATABASE_URL: str = "sqlite:///./protocolo_selva.db"

    # Auth
    JWT_SECRET: str = "protocolo-selva-dev-secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7
    # Accounts registered with these e-mails get the admin role
    ADMIN_EMAILS: List[str] = []

    # AI recipe generation; empty key means every request uses the fallback recipes
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:5500",
        "http://localhost:5500",
    ]

    # Onboarding quiz
    QUIZ_AUTO_CLOSE_SECONDS: int = 5
    QUIZ_SESSION_TTL_MINUTES: int = 30

    # Allow extra environment variables in .env
    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
