"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling the mock store and the database adapter to be swapped at
process start and mocked in tests.

Lookups by id return None for a missing entity; that is a normal outcome,
not an error. Adapters raise StorageError when the backend itself fails.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from .entities import Booking, Pet, Profile, Provider, Service


class IProfileReader(ABC):
    """Interface for profile read operations."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[Profile]:
        """Get the profile owned by user_id."""
        pass

    @abstractmethod
    def get_by_phone(self, phone: str) -> Optional[Profile]:
        """Get a profile by its E.164 phone number."""
        pass


class IProfileWriter(ABC):
    """Interface for profile write operations."""

    @abstractmethod
    def create(self, phone: str) -> Profile:
        """Create a profile for a newly authenticated phone number."""
        pass

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        """Apply a partial update; None if the profile does not exist."""
        pass


class IProfileRepository(IProfileReader, IProfileWriter):
    """Complete profile repository interface."""

    pass


class IPetReader(ABC):
    """Interface for pet read operations."""

    @abstractmethod
    def get_all_by_owner(self, owner_id: str) -> List[Pet]:
        """Get all pets owned by a profile."""
        pass

    @abstractmethod
    def get_by_id(self, pet_id: str) -> Optional[Pet]:
        """Get pet by ID."""
        pass


class IPetWriter(ABC):
    """Interface for pet write operations."""

    @abstractmethod
    def create(self, owner_id: str, fields: Dict[str, Any]) -> Pet:
        """Create a new pet for owner_id."""
        pass

    @abstractmethod
    def update(self, pet_id: str, fields: Dict[str, Any]) -> Optional[Pet]:
        """Apply a partial update; None if the pet does not exist."""
        pass

    @abstractmethod
    def delete(self, pet_id: str) -> bool:
        """Delete a pet. Bookings keep their pet_id reference."""
        pass


class IPetRepository(IPetReader, IPetWriter):
    """Complete pet repository interface."""

    pass


class IBookingReader(ABC):
    """Interface for booking read operations."""

    @abstractmethod
    def get_all_by_user(self, user_id: str) -> List[Booking]:
        """Get all bookings of a user, hydrated with pet/provider/service."""
        pass

    @abstractmethod
    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        """Get a hydrated booking by ID."""
        pass

    @abstractmethod
    def count_active_at_slot(
        self, provider_id: str, booking_date: date, booking_time: str
    ) -> int:
        """Count non-terminal bookings occupying a provider slot."""
        pass

    @abstractmethod
    def count_by_user(self, user_id: str) -> int:
        """Count all bookings of a user."""
        pass


class IBookingWriter(ABC):
    """Interface for booking write operations."""

    @abstractmethod
    def create(
        self, user_id: str, fields: Dict[str, Any], capacity: int = 0
    ) -> Booking:
        """Persist a new booking row atomically and return it.

        With ``capacity > 0`` the count of active bookings at the same
        (provider, date, time) and the insert happen as one step; a full
        slot raises SlotUnavailableError and nothing is written.
        """
        pass

    @abstractmethod
    def update(self, booking_id: str, fields: Dict[str, Any]) -> Optional[Booking]:
        """Apply a partial update; None if the booking does not exist."""
        pass


class IBookingRepository(IBookingReader, IBookingWriter):
    """Complete booking repository interface."""

    pass


class IProviderReader(ABC):
    """Read-only catalog access for providers."""

    @abstractmethod
    def get_all(self, type_filter: Optional[str] = None) -> List[Provider]:
        """Get providers (services attached), optionally restricted to one type."""
        pass

    @abstractmethod
    def get_by_id(self, provider_id: str) -> Optional[Provider]:
        """Get a provider with its full service collection."""
        pass


class IServiceReader(ABC):
    """Read-only catalog access for services."""

    @abstractmethod
    def get_by_provider(self, provider_id: str) -> List[Service]:
        """Get all services of a provider, available or not."""
        pass

    @abstractmethod
    def get_by_id(self, service_id: str) -> Optional[Service]:
        """Get service by ID."""
        pass
