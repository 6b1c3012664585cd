from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "admin-query"

    # Simulated latency of the in-process resource APIs.
    API_THROTTLE_MS: int = 0

    DEFAULT_ROWS_PER_PAGE: int = 10
    DEFAULT_SORT_BY: str = "createdAt"
    DEFAULT_SORT_DIR: str = "desc"  # asc | desc

    FILTER_ERROR_POLICY: str = "skip"  # skip | raise
    SELECTION_POLICY: str = "clear"  # clear | keep | retain_visible

    SETTINGS_STORAGE_KEY: str = "app.settings"
    REDIS_URL: str = ""


settings = Settings()
