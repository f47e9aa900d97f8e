"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification

Entities only check structural validity (required fields, closed
enumerations, numeric ranges). Cross-entity rules live in the services.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from petbkk.core.exceptions import ValidationError

# Closed enumerations
PET_SPECIES = ("dog", "cat", "bird", "rabbit", "other")
PET_GENDERS = ("male", "female")
PROVIDER_TYPES = (
    "veterinary",
    "grooming",
    "boarding",
    "pet_shop",
    "training",
    "pet_sitting",
)
BOOKING_STATUSES = ("pending", "confirmed", "in_progress", "completed", "cancelled")
WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_choice(field_name: str, value, choices) -> None:
    """Raise ValidationError naming the field when value is outside the enum."""
    if value not in choices:
        raise ValidationError(
            field_name,
            f"Invalid {field_name} '{value}'. Expected one of: {', '.join(choices)}",
        )


def require_text(field_name: str, value: Optional[str]) -> None:
    if not value or not str(value).strip():
        raise ValidationError(field_name, f"{field_name} is required")


def require_time_of_day(field_name: str, value: Optional[str]) -> None:
    """Time-of-day values are 24-hour "HH:MM" strings."""
    if not isinstance(value, str) or not TIME_OF_DAY_PATTERN.match(value):
        raise ValidationError(field_name, f"{field_name} must be a HH:MM time, got '{value}'")


@dataclass
class Profile:
    """One per authenticated user; root aggregate for pets and bookings."""

    id: Optional[str] = None
    phone: str = ""
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate domain rules."""
        require_text("phone", self.phone)
        if not self.phone.startswith("+"):
            raise ValidationError("phone", "Phone must be E.164 normalized")


@dataclass
class Pet:
    """A pet owned by exactly one profile."""

    id: Optional[str] = None
    owner_id: str = ""
    name: str = ""
    species: str = "dog"
    breed: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = None
    color: Optional[str] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        require_text("owner_id", self.owner_id)
        require_text("name", self.name)
        require_choice("species", self.species, PET_SPECIES)
        if self.gender is not None:
            require_choice("gender", self.gender, PET_GENDERS)
        if self.weight is not None and self.weight <= 0:
            raise ValidationError("weight", "Weight must be positive")


@dataclass
class DayHours:
    """Opening window for one weekday."""

    open: str = "09:00"
    close: str = "18:00"

    def __post_init__(self):
        require_time_of_day("open", self.open)
        require_time_of_day("close", self.close)
        if self.close <= self.open:
            raise ValidationError("close", "Closing time must be after opening time")

    def to_dict(self) -> Dict[str, str]:
        return {"open": self.open, "close": self.close}


@dataclass
class Service:
    """A bookable offering belonging to one provider."""

    id: Optional[str] = None
    provider_id: str = ""
    name: str = ""
    description: Optional[str] = None
    duration_minutes: int = 30
    price_min: float = 0.0
    price_max: float = 0.0
    pet_types: List[str] = field(default_factory=list)  # empty = all species
    is_available: bool = True
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        require_text("provider_id", self.provider_id)
        require_text("name", self.name)
        if self.duration_minutes <= 0:
            raise ValidationError("duration_minutes", "Duration must be positive")
        if self.price_min < 0:
            raise ValidationError("price_min", "Price cannot be negative")
        if self.price_max < self.price_min:
            raise ValidationError("price_max", "price_max must be >= price_min")
        for species in self.pet_types:
            require_choice("pet_types", species, PET_SPECIES)

    @property
    def is_fixed_price(self) -> bool:
        return self.price_min == self.price_max


@dataclass
class Provider:
    """A service business from the read-only catalog."""

    id: Optional[str] = None
    business_name: str = ""
    business_type: str = "veterinary"
    description: Optional[str] = None
    address: str = ""
    district: str = ""
    province: str = "Bangkok"
    phone: str = ""
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    opening_hours: Dict[str, Optional[DayHours]] = field(default_factory=dict)
    is_verified: bool = False
    created_at: Optional[datetime] = None
    services: List[Service] = field(default_factory=list)

    def __post_init__(self):
        """Validate business rules."""
        require_text("business_name", self.business_name)
        require_choice("business_type", self.business_type, PROVIDER_TYPES)
        if not 0.0 <= self.rating <= 5.0:
            raise ValidationError("rating", "Rating must be between 0.0 and 5.0")
        if self.review_count < 0:
            raise ValidationError("review_count", "Review count cannot be negative")
        for weekday in self.opening_hours:
            require_choice("opening_hours", weekday, WEEKDAYS)

    def hours_on(self, day: date) -> Optional[DayHours]:
        """Opening window for a calendar date; None means closed."""
        return self.opening_hours.get(WEEKDAYS[day.weekday()])


@dataclass
class Booking:
    """A scheduled appointment linking one user's pet to a provider's service."""

    id: Optional[str] = None
    user_id: str = ""
    pet_id: str = ""
    provider_id: str = ""
    service_id: str = ""
    booking_date: Optional[date] = None
    booking_time: str = ""
    status: str = "pending"
    notes: Optional[str] = None
    total_price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Joined data, hydrated by the persistence adapter
    pet: Optional[Pet] = None
    provider: Optional[Provider] = None
    service: Optional[Service] = None

    def __post_init__(self):
        """Validate business rules."""
        for name in ("user_id", "pet_id", "provider_id", "service_id"):
            require_text(name, getattr(self, name))
        if not isinstance(self.booking_date, date):
            raise ValidationError("booking_date", "booking_date must be a calendar date")
        require_time_of_day("booking_time", self.booking_time)
        require_choice("status", self.status, BOOKING_STATUSES)
