# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./database_storefront.db"

    FRONTEND_URL: str = ""
    LOG_LEVEL: str = "INFO"

    # Items below this stock count are reported on the admin dashboard
    LOW_STOCK_THRESHOLD: int = 10

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
