from __future__ import annotations

from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """
    App settings.

    Loads from environment variables and an optional local `.env` file.
    `.env` is gitignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    API_TITLE: str = "Blogdesk API"
    API_VERSION: str = "0.1.0"

    LOG_LEVEL: str = "INFO"

    # Database (Docker Compose). BLOGDESK_DATABASE_URL wins when set.
    BLOGDESK_DATABASE_URL: str | None = None
    BLOGDESK_DB_HOST: str = "localhost"
    BLOGDESK_DB_PORT: int = 5432
    BLOGDESK_DB_NAME: str = "blogdesk"
    BLOGDESK_DB_USER: str = "blogdesk"
    BLOGDESK_DB_PASSWORD: str = "blogdesk"

    # Auth (HTTP-only cookie session)
    AUTH_COOKIE_NAME: str = "blogdesk_session"
    AUTH_COOKIE_SECURE: bool = True
    AUTH_COOKIE_SAMESITE: str = "lax"  # lax|strict|none
    AUTH_SESSION_TTL_DAYS: int = 7
    AUTH_PASSWORD_ITERATIONS: int = 210_000
    # Multi-device continuity by default; flip to log out other devices.
    AUTH_REVOKE_SESSIONS_ON_PASSWORD_CHANGE: bool = False

    # Login throttling (per client IP, in-process)
    AUTH_LOGIN_MAX_ATTEMPTS: int = 5
    AUTH_LOGIN_WINDOW_S: int = 15 * 60

    # CORS (admin UI on :4321 calling the API with cookies)
    CORS_ORIGINS: str = "http://localhost:4321,http://127.0.0.1:4321"

    def database_url(self) -> str:
        if self.BLOGDESK_DATABASE_URL:
            return self.BLOGDESK_DATABASE_URL
        # psycopg async driver
        return (
            "postgresql+psycopg://"
            f"{self.BLOGDESK_DB_USER}:{self.BLOGDESK_DB_PASSWORD}"
            f"@{self.BLOGDESK_DB_HOST}:{self.BLOGDESK_DB_PORT}"
            f"/{self.BLOGDESK_DB_NAME}"
        )


settings = Settings()
