"""Seed data for the in-memory driver fleet."""

from ridecore.drivers.faker_provider import create_faker_instance
from ridecore.drivers.models import Driver, DriverStatus, Vehicle

DEFAULT_FLEET_SEED = 42

# One vehicle per type guarantees every ride type can be served
FLEET_VEHICLE_TYPES = ("sedan", "sedan", "eco", "xl", "luxury")


def generate_fleet(
    size: int = len(FLEET_VEHICLE_TYPES), seed: int | None = DEFAULT_FLEET_SEED
) -> list[Driver]:
    """Generate `size` available drivers with Faker-generated profiles."""
    fake = create_faker_instance(seed)
    drivers: list[Driver] = []
    for i in range(size):
        vehicle_type = FLEET_VEHICLE_TYPES[i % len(FLEET_VEHICLE_TYPES)]
        vehicle = fake.vehicle_for_type(vehicle_type)
        drivers.append(
            Driver(
                id=f"driver-{i + 1}",
                name=fake.name(),
                phone_number=fake.phone_number(),
                email=fake.email(),
                rating=round(fake.pyfloat(min_value=4.5, max_value=5.0), 1),
                total_rides=fake.random_int(min=100, max=2500),
                status=DriverStatus.AVAILABLE,
                vehicle=Vehicle(
                    id=f"vehicle-{i + 1}",
                    make=vehicle["make"],
                    model=vehicle["model"],
                    color=vehicle["color"],
                    license_plate=fake.license_plate_fleet(),
                    year=vehicle["year"],
                    type=vehicle_type,
                ),
            )
        )
    return drivers
