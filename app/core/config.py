from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # APP
    APP_NAME: str = "Sales Records API"
    ENV: str = "development"
    DEBUG: bool = True

    # Database
    DATABASE_URL: str = "sqlite:///./sales.db"
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = 60

    # CORS (comma-separated list in .env)
    CORS_ORIGINS: Optional[str] = None

    # HTTP cache
    CACHE_MAX_AGE: int = 60
    CACHE_SWR: int = 300

    # Listing defaults
    DEFAULT_SORT: str = "date-desc"
    DEFAULT_PAGE: int = 1
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "structured"  # structured | simple
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: Optional[str] = None

    # CSV import
    IMPORT_CSV_PATH: str = "truestate_assignment_dataset.csv"
    IMPORT_MAX_RECORDS: int = 1000
    IMPORT_BATCH_SIZE: int = 500

    @field_validator("JWT_SECRET")
    @classmethod
    def _jwt_min_length(cls, v: str) -> str:
        if v is None or len(v) < 32:
            raise ValueError("JWT secret must be at least 32 characters long.")
        return v

    @field_validator("DEFAULT_PAGE", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Pagination settings must be >= 1.")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        v = self.CORS_ORIGINS
        if not v:
            return []
        return [s.strip() for s in v.split(",") if s.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
