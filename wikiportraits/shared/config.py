# wikiportraits/shared/config.py
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "wikiportraits-uploader"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "wikiportraits-backend"

    # --- Session / Security ---
    SESSION_SECRET: str = "change-me-for-production"
    JWT_ALGORITHM: str = "HS256"
    SESSION_MAX_AGE_SEC: int = 60 * 60 * 24 * 7
    SESSION_COOKIE_NAME: str = "wp_session"

    # --- Wikimedia OAuth 1.0a consumer ---
    WIKIMEDIA_CLIENT_ID: Optional[str] = None
    WIKIMEDIA_CLIENT_SECRET: Optional[str] = None
    # Owner-only consumers can skip the handshake with a personal token
    WIKIMEDIA_PERSONAL_ACCESS_TOKEN: Optional[str] = None
    # Lets requests without a session write through the personal token's account
    SERVICE_ACCOUNT_WRITES: bool = False
    OAUTH_CALLBACK_URL: str = "http://localhost:8000/auth/callback"
    OAUTH_BASE_URL: str = "https://meta.wikimedia.org"

    # --- External Services ---
    COMMONS_API_URL: str = "https://commons.wikimedia.org/w/api.php"
    WIKIDATA_API_URL: str = "https://www.wikidata.org/w/api.php"
    WIKIPEDIA_API_URL_TEMPLATE: str = "https://{lang}.wikipedia.org/w/api.php"
    USER_AGENT: str = "WikiPortraits/1.0 (https://github.com/flogvit/wikiportraits)"

    HTTP_TIMEOUT_SEC: float = 30.0
    TOKEN_TIMEOUT_SEC: float = 10.0
    UPLOAD_TIMEOUT_SEC: float = 120.0

    # --- Resilience ---
    RETRY_ATTEMPTS: int = 3
    CIRCUIT_FAILURE_THRESHOLD: int = 5
    CIRCUIT_RECOVERY_SEC: int = 30

    # --- Caching ---
    CATEGORY_CACHE_TTL_SEC: int = 300

    # --- Rate limiting (requests per window) ---
    RATE_LIMIT_WINDOW_SEC: int = 60
    RATE_LIMIT_WRITE: int = 30
    RATE_LIMIT_READ: int = 60

    @property
    def oauth_enabled(self) -> bool:
        return bool(self.WIKIMEDIA_CLIENT_ID and self.WIKIMEDIA_CLIENT_SECRET)

    def wikipedia_api_url(self, lang: str = "en") -> str:
        return self.WIKIPEDIA_API_URL_TEMPLATE.format(lang=lang)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
