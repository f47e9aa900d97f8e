"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities and closed enumerations
- lifecycle.py: Booking status state machine
- slots.py: Bookable time-slot grid
- interfaces.py: Repository contracts
"""

from .entities import Booking, DayHours, Pet, Profile, Provider, Service
from .interfaces import (
    IBookingReader,
    IBookingRepository,
    IBookingWriter,
    IPetReader,
    IPetRepository,
    IPetWriter,
    IProfileReader,
    IProfileRepository,
    IProfileWriter,
    IProviderReader,
    IServiceReader,
)

__all__ = [
    # Domain entities
    "Booking",
    "DayHours",
    "Pet",
    "Profile",
    "Provider",
    "Service",
    # Repository interfaces
    "IBookingRepository",
    "IPetRepository",
    "IProfileRepository",
    "IProviderReader",
    "IServiceReader",
    # Segregated interfaces
    "IBookingReader",
    "IBookingWriter",
    "IPetReader",
    "IPetWriter",
    "IProfileReader",
    "IProfileWriter",
]
