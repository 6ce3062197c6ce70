from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Account Upgrade Service"
    APP_VERSION: str = "0.1.0"

    HOST: str = "0.0.0.0"
    PORT: int = 8001

    DATABASE_PATH: str = "data/auth.db"
    BACKUP_DIR: str = "data/backups"
    # Relative paths resolve against the package root.
    TEMPLATES_DIR: str = "templates"

    # Absolute base used when rendering links that leave the API (e.g. the upgrade page).
    SERVER_BASE_URL: str = "http://localhost:8001"

    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ACCESS_TOKEN_EXPIRES_MINUTES: int = 60

    CORS_ORIGINS: list[str] = ["http://localhost:3001"]

    # Realm the legacy crypt() hashes were issued under.
    LEGACY_REALM: str = "Old Hackage site"
    # Realm new-scheme credentials are derived in.
    SERVER_REALM: str = "Hackage"


settings = Settings()
