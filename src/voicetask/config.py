from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    google_maps_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("google_maps_api_key", "google_places_api_key"),
    )
    maps_timeout_seconds: float = 10.0

    user_timezone: str = "America/New_York"
    default_radius_m: int = 150
    base_confidence: float = 0.7

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    cors_allow_origins: list[str] = ["*"]
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    @property
    def has_google_maps(self) -> bool:
        return bool(self.google_maps_api_key)

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)


settings = Settings()
