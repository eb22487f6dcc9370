from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationSettings(BaseSettings):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Driver position tick
    tick_interval_seconds: float = Field(
        default=2.0,
        gt=0.0,
        le=60.0,
        description="Simulated seconds between driver position updates",
    )
    driver_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        le=200.0,
        description="Constant speed of the simulated driver",
    )

    # Proximity-based arrival detection
    arrival_threshold_km: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Distance at which the driver is considered arrived at pickup/destination",
    )
    boarding_delay_seconds: float = Field(
        default=3.0,
        ge=0.0,
        le=300.0,
        description="Delay between arrival at pickup and the ride starting",
    )

    # Where a freshly started ride places the driver relative to pickup
    initial_driver_offset_deg: float = Field(default=0.01, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_prefix="SIM_")


class PricingSettings(BaseSettings):
    base_price: float = Field(default=2.5, ge=0.0)
    per_km_rate: float = Field(default=1.25, ge=0.0)
    per_minute_rate: float = Field(default=0.35, ge=0.0)
    minimum_fare: float = Field(default=5.0, ge=0.0)
    surge_pricing: float = Field(default=1.0, ge=1.0, le=10.0)

    model_config = SettingsConfigDict(env_prefix="PRICING_")


class RouteProviderSettings(BaseSettings):
    access_token: str = ""
    base_url: str = "https://api.mapbox.com"
    profile: Literal["driving", "driving-traffic", "walking", "cycling"] = "driving-traffic"
    timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)

    model_config = SettingsConfigDict(env_prefix="MAPBOX_")

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Route provider base URL must start with http:// or https://")
        return v.rstrip("/")


class Settings(BaseSettings):
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    route_provider: RouteProviderSettings = Field(default_factory=RouteProviderSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
