"""PetBKK booking core: pets, providers and service bookings for Bangkok."""

__version__ = "0.1.0"
