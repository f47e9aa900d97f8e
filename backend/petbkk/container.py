"""
Service wiring.

Builds every application service from one repository bundle so the
presentation layer never constructs repositories itself.
"""

from datetime import datetime
from typing import Callable, Optional

from flask import current_app

from petbkk.core.config import (
    get_booking_slot_capacity,
    get_enforce_opening_hours,
    market_now,
)
from petbkk.repositories.factory import RepositoryBundle
from petbkk.services.booking_service import BookingService
from petbkk.services.catalog_service import CatalogService
from petbkk.services.pet_service import PetService
from petbkk.services.profile_service import ProfileService

EXTENSION_KEY = "petbkk"


class ServiceContainer:
    def __init__(
        self,
        repositories: RepositoryBundle,
        clock: Callable[[], datetime] = market_now,
        slot_capacity: Optional[int] = None,
        enforce_opening_hours: Optional[bool] = None,
    ):
        if slot_capacity is None:
            slot_capacity = get_booking_slot_capacity()
        if enforce_opening_hours is None:
            enforce_opening_hours = get_enforce_opening_hours()

        self.repositories = repositories
        self.bookings = BookingService(
            repositories.bookings,
            repositories.pets,
            repositories.providers,
            repositories.services,
            clock=clock,
            slot_capacity=slot_capacity,
            enforce_opening_hours=enforce_opening_hours,
        )
        self.catalog = CatalogService(
            repositories.providers,
            repositories.services,
            enforce_opening_hours=enforce_opening_hours,
        )
        self.pets = PetService(repositories.pets, clock=clock)
        self.profiles = ProfileService(
            repositories.profiles, repositories.pets, repositories.bookings
        )


def get_container() -> ServiceContainer:
    """Container of the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]
