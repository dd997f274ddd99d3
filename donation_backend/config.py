from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Any SQLAlchemy URL. MONGODB_URI is not read; records live in a SQL database
    DATABASE_URL: str = "sqlite:///donations.db"
    DB_ECHO: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    UPLOAD_DIR: str = "uploads"
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
