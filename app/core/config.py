# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment-driven configuration, read from the process env or `.env`.

    Must be set: SUPABASE_URL, SUPABASE_KEY, DATABASE_URL and
    SUPABASE_JWT_SECRET. Image uploads additionally need
    SUPABASE_SERVICE_ROLE_KEY.
    """

    PROJECT_NAME: str = "Bookstore API"
    API_V1_STR: str = "/api/v1"

    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "bookstore-products"

    # fallback card image for books with no variant image
    PLACEHOLDER_IMAGE_URL: str = "/assets/placeholder-image.png"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
