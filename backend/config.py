# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Empty string leaves the store unconfigured (reads return empty, writes fail)
    DATABASE_URL: str = "sqlite:///./storefront.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 365

    # Session cookie carrying the signed JWT
    SESSION_COOKIE_NAME: str = "app_session_id"

    # External identity that is always promoted to admin
    OWNER_OPEN_ID: str = ""

    FRONTEND_URL: str = ""
    CREATE_TABLES: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
