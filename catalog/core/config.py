from typing import Any, Dict, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator, Field


class Settings(BaseSettings):
    """Application settings."""

    # App config
    APP_NAME: str = "Catalog Content Service"
    APP_VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_V1_STR: str = "/api/v1"

    # Database (write path)
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "catalog"
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_POOL_RECYCLE: int = 1800
    DB_ECHO: bool = False

    # Read path (replica), mặc định dùng chung DATABASE_URL
    READ_DATABASE_URL: Optional[str] = None

    # Transaction policy cho các thao tác xóa có kiểm tra giao dịch mua/thuê
    DELETE_ISOLATION_LEVEL: str = "SERIALIZABLE"
    SERIALIZATION_RETRY_ATTEMPTS: int = Field(3, ge=1)

    # Identity lookup collaborator
    IDENTITY_SERVICE_URL: Optional[str] = None
    IDENTITY_SERVICE_TIMEOUT: float = 2.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "color"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def build_database_url(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not values.get("DATABASE_URL"):
            user = values.get("POSTGRES_USER", "postgres")
            password = values.get("POSTGRES_PASSWORD", "postgres")
            server = values.get("POSTGRES_SERVER", "localhost")
            port = values.get("POSTGRES_PORT", 5432)
            db = values.get("POSTGRES_DB", "catalog")
            values["DATABASE_URL"] = (
                f"postgresql+asyncpg://{user}:{password}@{server}:{port}/{db}"
            )
        if not values.get("READ_DATABASE_URL"):
            values["READ_DATABASE_URL"] = values["DATABASE_URL"]
        return values

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate app environment."""
        allowed_envs = {"development", "testing", "staging", "production"}
        if v.lower() not in allowed_envs:
            allowed = ", ".join(sorted(allowed_envs))
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v.lower()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in {"color", "json"}:
            raise ValueError("LOG_FORMAT must be 'color' or 'json'")
        return v.lower()

    @model_validator(mode="after")
    def set_debug_based_on_env(self) -> "Settings":
        """Set DEBUG based on APP_ENV."""
        if self.APP_ENV == "production":
            self.DEBUG = False
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
