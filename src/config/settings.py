from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    debug: bool = True
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Database
    DB_DSN: str = "sqlite+aiosqlite:///./rsvps.db"
    LOG_DB: bool = False

    # Shared secret for GET /api/rsvps; listing is open when empty
    OPERATOR_TOKEN: str = ""

    # Built frontend bundle served at "/" when set
    FRONTEND_DIST_DIR: str = ""

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    RUN_MIGRATIONS_ON_STARTUP: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
