# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import booking_service
from . import catalog_service
from . import pet_service
from . import profile_service

__all__ = [
    "booking_service",
    "catalog_service",
    "pet_service",
    "profile_service",
]
