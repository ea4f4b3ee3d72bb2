from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./library.db"
    REDIS_URL: Optional[str] = None
    CACHE_TTL_SECONDS: int = 300
    FRONTEND_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Tables are created on startup unless migrations own the schema
    AUTO_CREATE_TABLES: bool = True

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @property
    def allow_origins(self) -> List[str]:
        return [origin.strip() for origin in self.FRONTEND_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
