from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DEFAULT_OPEN_TIME: str = "09:00"
    DEFAULT_CLOSE_TIME: str = "21:00"
    SLOT_GRANULARITY_MINUTES: int = 30
    DEFAULT_SERVICE_DURATION_MINUTES: int = 30
    DEFAULT_BUSY_DURATION_MINUTES: int = 60
    # Closed branch days fall back to the default window unless this is set.
    RESPECT_BRANCH_CLOSURES: bool = False

    DOCUMENT_STORE_BASE_URL: str | None = None
    DOCUMENT_STORE_API_KEY: str | None = None
    DOCUMENT_STORE_TIMEOUT_SECONDS: float = 10.0

    SEED_DATA_PATH: str | None = None


settings = Settings()
