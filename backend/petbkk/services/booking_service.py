"""
Booking service following SOLID principles.

Owns the booking lifecycle: creation rules, status transitions and
per-user listing. Storage goes through the repository interfaces only.
"""

from datetime import date, datetime
from typing import Callable, List, Optional

from petbkk.core.config import market_now
from petbkk.core.exceptions import (
    InvalidStateError,
    NotAuthenticatedError,
    SlotUnavailableError,
    ValidationError,
)
from petbkk.core.logging_config import get_logger
from petbkk.domain import lifecycle
from petbkk.domain.entities import Booking
from petbkk.domain.interfaces import (
    IBookingRepository,
    IPetReader,
    IProviderReader,
    IServiceReader,
)
from petbkk.domain.slots import generate_time_slots, is_slot, slots_within_hours
from petbkk.schemas.dtos import BookingCreateRequest

logger = get_logger(__name__)


class BookingService:
    """Application service for booking-related use-cases.

    This service demonstrates:
    - Single Responsibility: Handles only booking business logic
    - Dependency Inversion: Depends on interfaces, not concrete implementations
    - Open/Closed: Capacity and opening-hours rules are switched on by
      configuration, not by editing the create path
    """

    def __init__(
        self,
        booking_repo: IBookingRepository,
        pet_repo: IPetReader,
        provider_repo: IProviderReader,
        service_repo: IServiceReader,
        clock: Callable[[], datetime] = market_now,
        slot_capacity: int = 0,
        enforce_opening_hours: bool = False,
    ):
        self.booking_repo = booking_repo
        self.pet_repo = pet_repo
        self.provider_repo = provider_repo
        self.service_repo = service_repo
        self.clock = clock
        self.slot_capacity = slot_capacity
        self.enforce_opening_hours = enforce_opening_hours

    def today(self) -> date:
        return self.clock().date()

    def create_booking(
        self, user_id: Optional[str], request: BookingCreateRequest
    ) -> Booking:
        """Create a new booking with business rule validation.

        Business Rules:
        - A user must be authenticated
        - The pet must belong to the user
        - The service must belong to the provider
        - The date must be today or later
        - The time must be on the slot grid
        - total_price is a snapshot of the service's price_min
        """
        if not user_id:
            raise NotAuthenticatedError()

        request.validate()

        if request.booking_date < self.today():
            self._reject("booking_date", "Booking date cannot be in the past", user_id)

        pet = self.pet_repo.get_by_id(request.pet_id)
        if not pet or pet.owner_id != user_id:
            self._reject("pet_id", "Pet not found", user_id)

        provider = self.provider_repo.get_by_id(request.provider_id)
        if not provider:
            self._reject("provider_id", "Provider not found", user_id)

        service = self.service_repo.get_by_id(request.service_id)
        if not service:
            self._reject("service_id", "Service not found", user_id)
        if service.provider_id != provider.id:
            self._reject(
                "service_id", "Service is not offered by the selected provider", user_id
            )

        slots = generate_time_slots()
        if self.enforce_opening_hours:
            slots = slots_within_hours(
                slots, provider.hours_on(request.booking_date), service.duration_minutes
            )
        if not is_slot(request.booking_time, slots):
            self._reject(
                "booking_time",
                f"{request.booking_time} is not an available time slot",
                user_id,
            )

        try:
            booking = self.booking_repo.create(
                user_id,
                {
                    "pet_id": pet.id,
                    "provider_id": provider.id,
                    "service_id": service.id,
                    "booking_date": request.booking_date,
                    "booking_time": request.booking_time,
                    "status": lifecycle.PENDING,
                    "notes": request.notes,
                    "total_price": service.price_min,
                },
                capacity=self.slot_capacity,
            )
        except SlotUnavailableError:
            logger.warning(
                "Booking rejected: slot at capacity",
                extra={
                    "context": {
                        "provider_id": provider.id,
                        "booking_date": request.booking_date.isoformat(),
                        "booking_time": request.booking_time,
                        "capacity": self.slot_capacity,
                    }
                },
            )
            raise

        logger.info(
            "Booking created",
            extra={
                "context": {
                    "booking_id": booking.id,
                    "user_id": user_id,
                    "provider_id": provider.id,
                    "service_id": service.id,
                    "booking_date": request.booking_date.isoformat(),
                    "booking_time": request.booking_time,
                }
            },
        )
        return booking

    def cancel_booking(
        self, booking_id: str, actor_user_id: Optional[str]
    ) -> Optional[Booking]:
        """Cancel a pending or confirmed booking owned by the actor.

        Returns None when the booking does not exist or belongs to someone
        else. Raises InvalidStateError for completed/cancelled bookings.
        """
        if not actor_user_id:
            raise NotAuthenticatedError()

        booking = self.booking_repo.get_by_id(booking_id)
        if not booking or booking.user_id != actor_user_id:
            return None

        return self._transition(booking, lifecycle.CANCELLED, actor_user_id)

    def confirm_booking(self, booking_id: str) -> Optional[Booking]:
        """Operator action: pending -> confirmed."""
        return self._advance(booking_id, lifecycle.CONFIRMED)

    def start_booking(self, booking_id: str) -> Optional[Booking]:
        """Operator action: confirmed -> in_progress."""
        return self._advance(booking_id, lifecycle.IN_PROGRESS)

    def complete_booking(self, booking_id: str) -> Optional[Booking]:
        """Operator action: in_progress -> completed."""
        return self._advance(booking_id, lifecycle.COMPLETED)

    def list_bookings(
        self, user_id: Optional[str], list_filter: str = "all"
    ) -> List[Booking]:
        """List a user's bookings ordered by (booking_date, booking_time)."""
        if not user_id:
            raise NotAuthenticatedError()
        if list_filter not in lifecycle.LIST_FILTERS:
            raise ValidationError(
                "filter",
                f"Invalid filter '{list_filter}'. Expected one of: "
                f"{', '.join(lifecycle.LIST_FILTERS)}",
            )

        bookings = [
            booking
            for booking in self.booking_repo.get_all_by_user(user_id)
            if booking.user_id == user_id
            and lifecycle.matches_filter(booking, list_filter)
        ]
        bookings.sort(key=lambda b: (b.booking_date, b.booking_time))
        return bookings

    def get_booking(
        self, booking_id: str, user_id: Optional[str]
    ) -> Optional[Booking]:
        """Get a hydrated booking, or None when absent or not owned."""
        if not user_id:
            raise NotAuthenticatedError()

        booking = self.booking_repo.get_by_id(booking_id)
        if not booking or booking.user_id != user_id:
            return None
        return booking

    def _advance(self, booking_id: str, target: str) -> Optional[Booking]:
        booking = self.booking_repo.get_by_id(booking_id)
        if not booking:
            return None
        return self._transition(booking, target)

    def _transition(
        self, booking: Booking, target: str, actor_user_id: Optional[str] = None
    ) -> Optional[Booking]:
        try:
            lifecycle.assert_transition(booking, target)
        except InvalidStateError:
            logger.warning(
                "Booking transition rejected",
                extra={
                    "context": {
                        "booking_id": booking.id,
                        "current_status": booking.status,
                        "target_status": target,
                    }
                },
            )
            raise

        updated = self.booking_repo.update(booking.id, {"status": target})
        logger.info(
            "Booking status changed",
            extra={
                "context": {
                    "booking_id": booking.id,
                    "from_status": booking.status,
                    "to_status": target,
                    "actor_user_id": actor_user_id,
                }
            },
        )
        return updated

    def _reject(self, field: str, message: str, user_id: str) -> None:
        logger.warning(
            "Booking rejected",
            extra={"context": {"field": field, "reason": message, "user_id": user_id}},
        )
        raise ValidationError(field, message)
