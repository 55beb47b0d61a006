from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./social.db"

    SECRET_KEY: str = "please-set-SECRET_KEY-in-env"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: list[str] = ["*"]

    # Лимиты выдачи и валидации
    FEED_LIMIT: int = 50
    SEARCH_LIMIT: int = 10
    POST_MAX_LENGTH: int = 1000
    COMMENT_MAX_LENGTH: int = 500
    BIO_MAX_LENGTH: int = 500

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()

database_url = settings.DATABASE_URL
