"""Custom Faker providers for generating a simulated driver fleet."""

from __future__ import annotations

import string
from typing import TYPE_CHECKING, TypedDict

from faker import Faker
from faker.providers import BaseProvider

if TYPE_CHECKING:
    from faker.proxy import Faker as FakerType


class VehicleDict(TypedDict):
    """Type for vehicle data dictionary."""

    make: str
    model: str
    year: int
    color: str
    type: str


class FleetVehicleProvider(BaseProvider):
    """Vehicles grouped by the fleet's vehicle types."""

    VEHICLE_DATA: dict[str, dict[str, list[str]]] = {
        "sedan": {"Toyota": ["Camry", "Corolla"], "Honda": ["Accord", "Civic"]},
        "suv": {"Toyota": ["RAV4"], "Ford": ["Explorer"], "Honda": ["CR-V"]},
        "luxury": {"Mercedes-Benz": ["S-Class", "E-Class"], "BMW": ["7 Series"]},
        "xl": {"Chevrolet": ["Suburban"], "Ford": ["Expedition"]},
        "eco": {"Tesla": ["Model 3", "Model Y"], "Toyota": ["Prius"]},
    }

    COLORS: list[str] = ["Black", "White", "Silver", "Blue", "Gray", "Red"]

    def vehicle_type(self) -> str:
        return self.random_element(list(self.VEHICLE_DATA.keys()))

    def vehicle_for_type(self, vehicle_type: str | None = None) -> VehicleDict:
        """Generate complete vehicle info for the given type.

        Args:
            vehicle_type: Fleet vehicle type. If None, picks a random type first.
        """
        if vehicle_type is None:
            vehicle_type = self.vehicle_type()
        makes = self.VEHICLE_DATA.get(vehicle_type, self.VEHICLE_DATA["sedan"])
        make = self.random_element(list(makes.keys()))
        return {
            "make": make,
            "model": self.random_element(makes[make]),
            "year": self.random_int(min=2018, max=2025),
            "color": self.random_element(self.COLORS),
            "type": vehicle_type,
        }

    def license_plate_fleet(self) -> str:
        """License plate in the ABC 123 format."""
        return self.numerify(self.lexify("??? ###", letters=string.ascii_uppercase))


def create_faker_instance(seed: int | None = None) -> FakerType:
    """Create a configured Faker instance with the fleet providers.

    Args:
        seed: Optional seed for reproducible random data.

    Returns:
        Configured Faker instance with en_US locale and custom providers.
    """
    fake: FakerType = Faker("en_US")

    if seed is not None:
        Faker.seed(seed)
        fake.seed_instance(seed)

    fake.add_provider(FleetVehicleProvider)

    return fake
