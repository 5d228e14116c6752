from typing import Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "AccrediGo"
    APP_DESCRIPTION: str = "Accreditation management API: facilities, gap analysis, billing and roles"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True
    SECRET_KEY: str = "your-super-secret-key-change-it-in-production"

    # --- Database (MySQL/SQLModel) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "accredigo"
    DB_URL: Optional[str] = None  # Full async URL; overrides the DB_* fields when set

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        # Build async MySQL connection URL
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Pagination ---
    PAGE_SIZE_DEFAULT: int = 10
    PAGE_SIZE_MAX: int = 100

    # --- Accounts ---
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = 24
    EMAIL_VERIFICATION_URL: str = "http://localhost:8000/api/v1/auth/verify-email"
    EXPLORE_TRIAL_DAYS: int = 14

    # --- Notification service ---
    NOTIFICATION_DRIVER: str = "mock"  # mock, email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: Optional[int] = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Cookie ---
    ACCESS_TOKEN_COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False  # Set True in production (HTTPS only)
    COOKIE_SAMESITE: str = "lax"  # lax, strict, none

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"  # console level; files always get DEBUG
    LOG_RETENTION_DAYS: int = 30
    LOG_FILE_PREFIX: str = "accredigo"

    # --- API route prefixes (optional, overridable per deployment) ---
    API_V1_AUTH_PREFIX: str = "/api/v1/auth"
    API_V1_USERS_PREFIX: str = "/api/v1/users"
    API_V1_ROLES_PREFIX: str = "/api/v1/roles"
    API_V1_FACILITIES_PREFIX: str = "/api/v1/facilities"
    API_V1_ACCREDITATIONS_PREFIX: str = "/api/v1/accreditations"
    API_V1_BILLING_PREFIX: str = "/api/v1/billing"
    API_V1_SESSIONS_PREFIX: str = "/api/v1/sessions"
    API_HEALTH_PREFIX: str = "/api/health"

    # --- Gunicorn process name (optional) ---
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
