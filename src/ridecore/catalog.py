"""Static catalogs of ride types, payment methods and cancellation reasons."""

from ridecore.ride import CancellationReason, PaymentMethod, RideType

DEFAULT_RIDE_TYPES: tuple[RideType, ...] = (
    RideType(
        id="economy",
        name="Economy",
        description="Affordable rides for everyday use",
        capacity=4,
        icon="car",
        price_multiplier=1.0,
        estimated_pickup_minutes=3,
    ),
    RideType(
        id="comfort",
        name="Comfort",
        description="Newer cars with extra legroom",
        capacity=4,
        icon="car-comfort",
        price_multiplier=1.3,
        estimated_pickup_minutes=5,
    ),
    RideType(
        id="premium",
        name="Premium",
        description="High-end cars with top-rated drivers",
        capacity=4,
        icon="car-premium",
        price_multiplier=1.8,
        estimated_pickup_minutes=7,
    ),
    RideType(
        id="xl",
        name="XL",
        description="Spacious vehicles for groups up to 6",
        capacity=6,
        icon="car-xl",
        price_multiplier=1.5,
        estimated_pickup_minutes=6,
    ),
)

DEFAULT_PAYMENT_METHODS: tuple[PaymentMethod, ...] = (
    PaymentMethod(
        id="card-1",
        type="card",
        label="Visa •••• 4242",
        last_four="4242",
        expiry_date="12/25",
        is_default=True,
    ),
    PaymentMethod(
        id="card-2",
        type="card",
        label="Mastercard •••• 5555",
        last_four="5555",
        expiry_date="08/24",
    ),
    PaymentMethod(id="paypal-1", type="paypal", label="PayPal"),
    PaymentMethod(id="apple-pay-1", type="apple_pay", label="Apple Pay"),
)

CANCELLATION_REASONS: tuple[CancellationReason, ...] = (
    CancellationReason(id="wait-too-long", reason="Wait time too long"),
    CancellationReason(id="changed-mind", reason="Changed my mind"),
    CancellationReason(id="wrong-address", reason="Entered wrong address"),
    CancellationReason(id="driver-asked", reason="Driver asked me to cancel"),
    CancellationReason(id="other", reason="Other reason"),
)

# Vehicle type a ride type is served by; ride types not listed accept any vehicle
RIDE_TYPE_VEHICLES: dict[str, str] = {
    "premium": "luxury",
    "xl": "xl",
}


def default_payment_method(
    methods: tuple[PaymentMethod, ...] | list[PaymentMethod] = DEFAULT_PAYMENT_METHODS,
) -> PaymentMethod | None:
    return next((m for m in methods if m.is_default), None)
