"""SafeRadius — Configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./saferadius.db"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60

    # Field encryption (AES-GCM, key derived with PBKDF2)
    ENCRYPTION_KEY: str = "saferadius-secret-key-2025"
    ENCRYPTION_KEY_VERSION: str = "v1"
    ENCRYPTION_RETIRED_KEYS: dict[str, str] = {}  # version -> passphrase, decrypt only
    ENCRYPTION_SALT: str = "saferadius-salt"
    ENCRYPTION_KDF_ITERATIONS: int = 200_000

    # Admin bootstrap
    ADMIN_SECRET_KEY: str = ""
    DEFAULT_ADMIN_EMAIL: str = ""
    DEFAULT_ADMIN_PASSWORD: str = ""

    # Geocoding (Nominatim)
    GEOCODER_URL: str = "https://nominatim.openstreetmap.org/search"
    GEOCODER_USER_AGENT: str = "SafeRadius/1.0"
    GEOCODER_COUNTRY: str = "India"
    GEOCODER_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Admin dashboard
    RECENT_ACTIVITY_DAYS: int = 7

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
