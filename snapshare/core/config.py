# snapshare/core/config.py
from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "SnapShare API"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    FRONTEND_URL: str = "http://localhost:3000"

    # MongoDB Settings
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "snapshare"
    MONGODB_POOL_SIZE: int = 10
    MONGODB_MAX_IDLE_TIME_MS: int = 60000  # 1 minute

    # Atlas Search index backing username autocomplete
    USER_SEARCH_INDEX: str = "default"
    USER_SUGGESTION_LIMIT: int = 10

    # Security and JWT
    JWT_SECRET: str = "change-this-secret-before-deploying-snapshare"
    JWT_AUDIENCE: str = "snapshare:auth"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60*7*24
    RESET_TOKEN_EXPIRE_MINUTES: int = 10

    # Object storage (S3 or any S3-compatible endpoint)
    AWS_REGION: str = "us-east-1"
    STORAGE_BUCKET_NAME: str = "snapshare-images"
    STORAGE_ENDPOINT_URL: Optional[str] = None
    STORAGE_PUBLIC_BASE_URL: Optional[str] = None

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5000",
    ]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"  # Options: DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"

settings = Settings()
