from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    CATALOG_API_URL: str = "http://localhost:3001/api"

    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    DATASTORE_PROVIDER: str = "auto"

    SESSION_TOKEN: str | None = None
    SESSION_FILE: str | None = None

    HTTP_TIMEOUT_SECONDS: float | None = None
    DISCONNECT_POLL_SECONDS: float = 0.5

    LOG_LEVEL: str = "INFO"


settings = Settings()
