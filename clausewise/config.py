from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All values come from .env file or environment. Validated at startup —
    missing required values cause an immediate error with a clear message.
    """

    # Database
    DATABASE_URL: str  # async driver (asyncpg)
    DATABASE_URL_SYNC: str = ""  # sync driver (for Alembic CLI)

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Object storage
    STORAGE_BACKEND: Literal["local", "s3"] = "local"
    STORAGE_DIR: str = "/app/uploads"
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BUCKET: str = "contracts"
    S3_REGION: str = "us-east-1"

    # Auth (tokens are issued by the external identity provider)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Retention
    CONTRACT_RETENTION_HOURS: int = 48
    SWEEP_BATCH_SIZE: int = 500
    SWEEP_TIME_BUDGET_SECONDS: float = 240.0
    SWEEP_SCHEDULE_MINUTES: int = 60

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 20

    # App
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
