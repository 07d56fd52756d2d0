from typing import List, Optional
import json
from pydantic_settings import BaseSettings
from pydantic import AnyHttpUrl, validator


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "InfluencerDB"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    SECRET_KEY: str
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_STR: str = "/api/v1"
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            # Try to parse as JSON first (for Secret Manager format)
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Otherwise split by comma
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # Clerk Authentication
    CLERK_FRONTEND_API: str  # e.g., "your-app.clerk.accounts.dev"
    CLERK_JWKS_TIMEOUT_SECONDS: float = 10.0
    CLERK_JWT_LEEWAY_SECONDS: int = 5
    CLERK_VERIFY_ISSUER: bool = True

    # Spreadsheet import
    IMPORT_ALLOWED_EXTENSIONS: List[str] = ["csv", "xlsx", "xls"]
    MAX_IMPORT_FILE_SIZE_MB: int = 10
    IMPORT_ERROR_RESPONSE_LIMIT: int = 50  # Error rows returned inline; all are persisted
    IMPORT_PREVIEW_ROWS: int = 5
    IMPORT_RATE_LIMIT_PER_MINUTE: int = 10  # Max import requests per minute per user

    # Listing / export
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    EXPORT_MAX_ROWS: int = 10000
    DASHBOARD_RECENT_DAYS: int = 30
    DASHBOARD_PAGE_SIZE: int = 10

    # Frontend
    FRONTEND_URL: Optional[str] = "http://localhost:3000"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
