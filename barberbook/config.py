from functools import lru_cache
from typing import Annotated, List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Barberbook Scheduling Service")
    cors_origins: Annotated[List[AnyHttpUrl], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )
    supabase_url: AnyHttpUrl | None = Field(
        default=None
    )
    supabase_key: str | None = Field(
        default=None
    )
    supabase_service_role_key: str | None = Field(
        default=None
    )
    supabase_timeout: float = Field(
        default=10.0
    )
    storage_bucket: str = Field(
        default="barbershop-assets"
    )
    use_mock_data: bool = Field(
        default=True
    )
    timezone: str = Field(
        default="America/Sao_Paulo"
    )
    slot_granularity_minutes: int = Field(
        default=30
    )
    booking_cutoff_minutes: int = Field(
        default=5
    )
    fallback_appointment_minutes: int = Field(
        default=30
    )
    barber_commission_rate: float = Field(
        default=0.6
    )
    log_level: str = Field(
        default="INFO"
    )

    model_config = SettingsConfigDict(env_prefix="BARBERBOOK_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("slot_granularity_minutes", "fallback_appointment_minutes")
    def _positive_minutes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"must be > 0, got {value}")
        return value

    @field_validator("booking_cutoff_minutes")
    def _non_negative_cutoff(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"must be >= 0, got {value}")
        return value

    @field_validator("barber_commission_rate")
    def _commission_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"must be between 0.0 and 1.0, got {value}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
