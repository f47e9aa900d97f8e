# Controllers package initialization
# This file makes the controllers directory a Python package
# and allows importing controller modules

from . import (
    auth_controller,
    booking_controller,
    catalog_controller,
    health_controller,
    pet_controller,
)

__all__ = [
    "auth_controller",
    "booking_controller",
    "catalog_controller",
    "health_controller",
    "pet_controller",
]
