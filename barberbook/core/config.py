from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ID: str = "barber-booking-app"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "auto"  # "auto", "memory", "json"
    STORE_DATA_DIR: str = "./data/store"

    DEFAULT_PROVIDER_ID: str = "evan"
    BOOKING_HORIZON_DAYS: int = 21
    BUSINESS_TIMEZONE: str = "Europe/Dublin"

    NOTIFICATIONS_ENABLED: bool = True
    WEBHOOK_TIMEOUT_SECONDS: float = 10.0

    PUBLIC_BOOKING_BASE_URL: str = "https://thecut.com"

    @field_validator("APP_ID", "DEFAULT_PROVIDER_ID")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("STORE_PROVIDER")
    @classmethod
    def _known_store(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in {"auto", "memory", "json"}:
            raise ValueError("STORE_PROVIDER must be one of auto, memory, json")
        return value

    @field_validator("BUSINESS_TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @field_validator("BOOKING_HORIZON_DAYS")
    @classmethod
    def _positive_horizon(cls, value: int) -> int:
        if value < 1:
            raise ValueError("BOOKING_HORIZON_DAYS must be at least 1")
        return value


settings = Settings()
