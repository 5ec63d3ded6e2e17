from pathlib import Path
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./portfolio.db"
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    # local blob store
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # email/notification function; when unset, notifications are only logged
    NOTIFICATION_WEBHOOK_URL: str | None = None
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0

    SSO_SHARED_SECRET: str | None = None
    SSO_ERROR_URL: str = "/sso/error"
    SESSION_COOKIE_NAME: str = "portfolio_session"
    SESSION_TTL_MINUTES: int = 12 * 60

    # X-User-Email header auth; None means "only when APP_ENV is local"
    DEV_AUTH_ENABLED: bool | None = None

    @property
    def dev_auth_enabled(self) -> bool:
        if self.DEV_AUTH_ENABLED is not None:
            return self.DEV_AUTH_ENABLED
        return self.APP_ENV == "local"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

settings = Settings()
