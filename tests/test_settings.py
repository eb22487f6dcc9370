import pytest
from pydantic import ValidationError

from ridecore.settings import (
    PricingSettings,
    RouteProviderSettings,
    Settings,
    SimulationSettings,
    get_settings,
)


@pytest.mark.unit
class TestSimulationSettings:
    def test_defaults(self):
        settings = SimulationSettings()
        assert settings.tick_interval_seconds == 2.0
        assert settings.driver_speed_kmh == 30.0
        assert settings.arrival_threshold_km == 0.05
        assert settings.boarding_delay_seconds == 3.0
        assert settings.initial_driver_offset_deg == 0.01
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SIM_TICK_INTERVAL_SECONDS", "1")
        monkeypatch.setenv("SIM_DRIVER_SPEED_KMH", "45")
        monkeypatch.setenv("SIM_LOG_LEVEL", "DEBUG")

        settings = SimulationSettings()
        assert settings.tick_interval_seconds == 1.0
        assert settings.driver_speed_kmh == 45.0
        assert settings.log_level == "DEBUG"

    def test_validation(self):
        with pytest.raises(ValidationError):
            SimulationSettings(tick_interval_seconds=0)

        with pytest.raises(ValidationError):
            SimulationSettings(driver_speed_kmh=-5)

        with pytest.raises(ValidationError):
            SimulationSettings(arrival_threshold_km=2.0)

        with pytest.raises(ValidationError):
            SimulationSettings(log_format="xml")


@pytest.mark.unit
class TestPricingSettings:
    def test_defaults(self):
        settings = PricingSettings()
        assert settings.base_price == 2.5
        assert settings.per_km_rate == 1.25
        assert settings.per_minute_rate == 0.35
        assert settings.minimum_fare == 5.0
        assert settings.surge_pricing == 1.0

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PRICING_SURGE_PRICING", "1.8")
        assert PricingSettings().surge_pricing == 1.8

    def test_surge_below_one_rejected(self):
        with pytest.raises(ValidationError):
            PricingSettings(surge_pricing=0.8)


@pytest.mark.unit
class TestRouteProviderSettings:
    def test_defaults(self):
        settings = RouteProviderSettings()
        assert settings.access_token == ""
        assert settings.base_url == "https://api.mapbox.com"
        assert settings.profile == "driving-traffic"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MAPBOX_ACCESS_TOKEN", "pk.from-env")
        monkeypatch.setenv("MAPBOX_PROFILE", "driving")
        settings = RouteProviderSettings()
        assert settings.access_token == "pk.from-env"
        assert settings.profile == "driving"

    def test_base_url_trailing_slash_stripped(self):
        assert RouteProviderSettings(base_url="http://localhost:8080/").base_url == (
            "http://localhost:8080"
        )

    def test_base_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            RouteProviderSettings(base_url="api.mapbox.com")


@pytest.mark.unit
def test_get_settings_groups(monkeypatch):
    monkeypatch.setenv("SIM_BOARDING_DELAY_SECONDS", "5")

    settings = get_settings()

    assert isinstance(settings, Settings)
    assert settings.simulation.boarding_delay_seconds == 5.0
    assert settings.pricing.minimum_fare == 5.0
    assert settings.route_provider.timeout_seconds == 5.0
