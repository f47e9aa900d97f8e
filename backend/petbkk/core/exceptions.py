"""
Custom exceptions for the booking core.
Following SOLID principles - centralized error handling.

Every failure carries enough context (field, entity id, attempted
transition) for the presentation layer to render a precise message.
"""

from typing import Any, Dict, Optional


class PetBkkError(Exception):
    """Base class for all errors raised by the booking core."""

    error_code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_details(self) -> Dict[str, Any]:
        """Context payload exposed to API clients."""
        return {}


class ValidationError(PetBkkError, ValueError):
    """Input violates an entity or operation precondition."""

    error_code = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_details(self) -> Dict[str, Any]:
        return {"field": self.field}


class SlotUnavailableError(ValidationError):
    """The requested (provider, date, time) slot is already at capacity."""

    error_code = "slot_unavailable"

    def __init__(self, provider_id: str, booking_date: str, booking_time: str):
        super().__init__(
            "booking_time",
            f"Slot {booking_date} {booking_time} is fully booked for provider {provider_id}",
        )
        self.provider_id = provider_id
        self.booking_date = booking_date
        self.booking_time = booking_time

    def to_details(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "provider_id": self.provider_id,
            "booking_date": self.booking_date,
            "booking_time": self.booking_time,
        }


class NotAuthenticatedError(PetBkkError):
    """Operation requires an owning user context that is absent."""

    error_code = "not_authenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class InvalidStateError(PetBkkError):
    """Lifecycle transition not permitted from the current status."""

    error_code = "invalid_state"

    def __init__(self, booking_id: Optional[str], current_status: str, target_status: str):
        super().__init__(
            f"Cannot move booking {booking_id} from '{current_status}' to '{target_status}'"
        )
        self.booking_id = booking_id
        self.current_status = current_status
        self.target_status = target_status

    def to_details(self) -> Dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "current_status": self.current_status,
            "target_status": self.target_status,
        }


class StorageError(PetBkkError):
    """The persistence adapter failed (network, database or file IO)."""

    error_code = "storage_error"


class NotFoundError(PetBkkError):
    """
    Raised by the HTTP layer only. The core models a missing entity as
    ``None`` so callers can render a "not found" state.
    """

    error_code = "not_found"

    def __init__(self, resource: str, identifier: Optional[str] = None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier

    def to_details(self) -> Dict[str, Any]:
        return {"resource": self.resource, "id": self.identifier}
