"""
Environment configuration for the leave management API.

Uses Pydantic's settings management to handle environment variables
with proper type validation and default values. A single `Settings`
instance is built at process start and handed to `create_app`; nothing
below the application factory reads the environment directly.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def get_secret_key_default() -> str:
        """Generate a default secret key if not provided"""
        import secrets
        import string
        alphabet = string.ascii_letters + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(32))

    # Application configuration
    APP_NAME: str = "College Leave Management API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    FRONTEND_URL: str = Field(default="http://localhost:3000", alias="NEXTJS_URL")
    CORS_ORIGINS: str = "*"

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "leave_management"
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 5
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # Security configuration
    JWT_SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_BCRYPT_ROUNDS: int = 12

    # Leave policy
    DEFAULT_LEAVE_QUOTA: float = 30
    OTP_VALIDITY_MINUTES: int = 10

    # Seed account
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Email configuration
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    EMAIL_FROM_NAME: str = "Leave Management"
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")

    # Image storage
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    PROFILE_IMAGE_FOLDER: str = "profile_images"
    MAX_UPLOAD_SIZE: int = Field(default=5 * 1024 * 1024, alias="MAX_FILE_SIZE")

    # Google OAuth
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_REDIRECT_URI: Optional[str] = Field(default=None, alias="GOOGLE_CALLBACK_URL")

    # Scheduler
    REDIS_URL: str = "redis://localhost:6379/0"
    SWEEP_HOUR: int = 7
    SWEEP_MINUTE: int = 0
    SWEEP_TIMEZONE: str = "Asia/Kolkata"
    SWEEP_LOCK_TIMEOUT_SECONDS: int = 60 * 60

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return v

    @field_validator("DEFAULT_LEAVE_QUOTA")
    @classmethod
    def validate_quota(cls, v: float) -> float:
        if v < 0:
            raise ValueError("DEFAULT_LEAVE_QUOTA must be non-negative")
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from a comma separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def oauth_enabled(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
