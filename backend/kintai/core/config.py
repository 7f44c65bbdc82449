from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    DATABASE_URL: str = "postgresql+asyncpg://kintai:kintai_secret@db:5432/kintai"
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"

    # 月次集計・日付グルーピングに使うローカルタイムゾーン
    TIMEZONE: str = "Asia/Tokyo"

    # bcrypt hash of the administrator PIN; empty disables unlocking
    ADMIN_PIN_HASH: str = ""
    ADMIN_LOCK_TIMEOUT_MINUTES: int = 5

    DUPLICATE_PUNCH_WINDOW_SECONDS: float = 2.0

    RUN_MIGRATIONS_ON_STARTUP: bool = True
    MIGRATIONS_CWD: str = "/app"

    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]


settings = Settings()
