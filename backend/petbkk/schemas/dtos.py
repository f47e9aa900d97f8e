"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs raise ValidationError naming the offending field. Response
DTOs are built from domain entities and serialize dates as ISO-8601.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from petbkk.core.exceptions import ValidationError
from petbkk.domain.entities import (
    PET_GENDERS,
    PET_SPECIES,
    require_choice,
    require_text,
    require_time_of_day,
)


def _iso(value: Optional[Any]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def parse_iso_date(field_name: str, value: Any) -> Optional[date]:
    """Accept a date or an ISO-8601 calendar date string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(field_name, f"{field_name} must be an ISO date (YYYY-MM-DD)")


def parse_weight(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("weight", "Weight must be a number")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass
class BookingCreateRequest:
    """DTO for booking creation requests."""

    pet_id: str
    provider_id: str
    service_id: str
    booking_date: date
    booking_time: str
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookingCreateRequest":
        return cls(
            pet_id=data.get("pet_id") or "",
            provider_id=data.get("provider_id") or "",
            service_id=data.get("service_id") or "",
            booking_date=parse_iso_date("booking_date", data.get("booking_date")),
            booking_time=data.get("booking_time") or "",
            notes=_clean(data.get("notes")),
        )

    def validate(self) -> None:
        """Validate the request data."""
        require_text("pet_id", self.pet_id)
        require_text("provider_id", self.provider_id)
        require_text("service_id", self.service_id)
        if not isinstance(self.booking_date, date):
            raise ValidationError("booking_date", "Please select a date")
        require_time_of_day("booking_time", self.booking_time)


@dataclass
class PetCreateRequest:
    """DTO for pet creation requests."""

    name: str
    species: str
    breed: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = None
    color: Optional[str] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PetCreateRequest":
        return cls(
            name=(data.get("name") or "").strip(),
            species=data.get("species") or "",
            breed=_clean(data.get("breed")),
            gender=_clean(data.get("gender")),
            birth_date=parse_iso_date("birth_date", data.get("birth_date")),
            weight=parse_weight(data.get("weight")),
            color=_clean(data.get("color")),
            photo_url=_clean(data.get("photo_url")),
            notes=_clean(data.get("notes")),
        )

    def validate(self, today: Optional[date] = None) -> None:
        """Validate the request data."""
        require_text("name", self.name)
        require_choice("species", self.species, PET_SPECIES)
        if self.gender is not None:
            require_choice("gender", self.gender, PET_GENDERS)
        if self.weight is not None and self.weight <= 0:
            raise ValidationError("weight", "Weight must be positive")
        if self.birth_date and today and self.birth_date > today:
            raise ValidationError("birth_date", "Birth date cannot be in the future")

    def to_fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "species": self.species,
            "breed": self.breed,
            "gender": self.gender,
            "birth_date": self.birth_date,
            "weight": self.weight,
            "color": self.color,
            "photo_url": self.photo_url,
            "notes": self.notes,
        }


@dataclass
class PetUpdateRequest:
    """DTO for pet update requests. None means "leave unchanged"."""

    name: Optional[str] = None
    species: Optional[str] = None
    breed: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = None
    color: Optional[str] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PetUpdateRequest":
        return cls(
            name=data.get("name"),
            species=data.get("species"),
            breed=data.get("breed"),
            gender=data.get("gender"),
            birth_date=parse_iso_date("birth_date", data.get("birth_date")),
            weight=parse_weight(data.get("weight")),
            color=data.get("color"),
            photo_url=data.get("photo_url"),
            notes=data.get("notes"),
        )

    def validate(self, today: Optional[date] = None) -> None:
        """Validate the request data."""
        if self.name is not None:
            require_text("name", self.name)
        if self.species is not None:
            require_choice("species", self.species, PET_SPECIES)
        if self.gender is not None:
            require_choice("gender", self.gender, PET_GENDERS)
        if self.weight is not None and self.weight <= 0:
            raise ValidationError("weight", "Weight must be positive")
        if self.birth_date and today and self.birth_date > today:
            raise ValidationError("birth_date", "Birth date cannot be in the future")

    def changes(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in self.__dict__.items()
            if value is not None
        }


@dataclass
class ProfileUpdateRequest:
    """DTO for profile update requests. Phone is not editable."""

    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileUpdateRequest":
        if "phone" in data:
            raise ValidationError("phone", "Phone number cannot be changed")
        return cls(display_name=data.get("display_name"), avatar_url=data.get("avatar_url"))

    def validate(self) -> None:
        """Validate the request data."""
        if self.display_name is not None and len(self.display_name.strip()) > 100:
            raise ValidationError("display_name", "Display name must be at most 100 characters")

    def changes(self) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        if self.display_name is not None:
            changes["display_name"] = self.display_name.strip() or None
        if self.avatar_url is not None:
            changes["avatar_url"] = self.avatar_url.strip() or None
        return changes


@dataclass
class ProfileResponse:
    """DTO for profile API responses."""

    id: str
    phone: str
    display_name: Optional[str]
    avatar_url: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, profile) -> "ProfileResponse":
        """Create response from domain entity."""
        return cls(
            id=profile.id,
            phone=profile.phone,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "phone": self.phone,
            "display_name": self.display_name,
            "avatar_url": self.avatar_url,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class PetResponse:
    """DTO for pet API responses."""

    id: str
    owner_id: str
    name: str
    species: str
    breed: Optional[str]
    gender: Optional[str]
    birth_date: Optional[date]
    weight: Optional[float]
    color: Optional[str]
    photo_url: Optional[str]
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, pet) -> "PetResponse":
        """Create response from domain entity."""
        return cls(
            id=pet.id,
            owner_id=pet.owner_id,
            name=pet.name,
            species=pet.species,
            breed=pet.breed,
            gender=pet.gender,
            birth_date=pet.birth_date,
            weight=pet.weight,
            color=pet.color,
            photo_url=pet.photo_url,
            notes=pet.notes,
            created_at=pet.created_at,
            updated_at=pet.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["birth_date"] = _iso(self.birth_date)
        data["created_at"] = _iso(self.created_at)
        data["updated_at"] = _iso(self.updated_at)
        return data


@dataclass
class ServiceResponse:
    """DTO for service API responses."""

    id: str
    provider_id: str
    name: str
    description: Optional[str]
    duration_minutes: int
    price_min: float
    price_max: float
    pet_types: List[str]
    is_available: bool
    created_at: Optional[datetime]
    is_fixed_price: bool = False

    @classmethod
    def from_domain(cls, service) -> "ServiceResponse":
        """Create response from domain entity."""
        return cls(
            id=service.id,
            provider_id=service.provider_id,
            name=service.name,
            description=service.description,
            duration_minutes=service.duration_minutes,
            price_min=service.price_min,
            price_max=service.price_max,
            pet_types=list(service.pet_types),
            is_available=service.is_available,
            created_at=service.created_at,
            is_fixed_price=service.is_fixed_price,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["created_at"] = _iso(self.created_at)
        return data


@dataclass
class ProviderResponse:
    """DTO for provider API responses, services attached."""

    id: str
    business_name: str
    business_type: str
    description: Optional[str]
    address: str
    district: str
    province: str
    phone: str
    email: Optional[str]
    website: Optional[str]
    logo_url: Optional[str]
    rating: float
    review_count: int
    opening_hours: Dict[str, Optional[Dict[str, str]]]
    is_verified: bool
    created_at: Optional[datetime]
    services: List[ServiceResponse] = field(default_factory=list)

    @classmethod
    def from_domain(cls, provider) -> "ProviderResponse":
        """Create response from domain entity."""
        return cls(
            id=provider.id,
            business_name=provider.business_name,
            business_type=provider.business_type,
            description=provider.description,
            address=provider.address,
            district=provider.district,
            province=provider.province,
            phone=provider.phone,
            email=provider.email,
            website=provider.website,
            logo_url=provider.logo_url,
            rating=provider.rating,
            review_count=provider.review_count,
            opening_hours={
                day: hours.to_dict() if hours else None
                for day, hours in provider.opening_hours.items()
            },
            is_verified=provider.is_verified,
            created_at=provider.created_at,
            services=[ServiceResponse.from_domain(s) for s in provider.services],
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["created_at"] = _iso(self.created_at)
        data["services"] = [s.to_dict() for s in self.services]
        return data


@dataclass
class BookingResponse:
    """DTO for booking API responses with joined pet/provider/service."""

    id: str
    user_id: str
    pet_id: str
    provider_id: str
    service_id: str
    booking_date: date
    booking_time: str
    status: str
    notes: Optional[str]
    total_price: Optional[float]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    pet: Optional[PetResponse] = None
    provider: Optional[ProviderResponse] = None
    service: Optional[ServiceResponse] = None

    @classmethod
    def from_domain(cls, booking) -> "BookingResponse":
        """Create response from domain entity."""
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            pet_id=booking.pet_id,
            provider_id=booking.provider_id,
            service_id=booking.service_id,
            booking_date=booking.booking_date,
            booking_time=booking.booking_time,
            status=booking.status,
            notes=booking.notes,
            total_price=booking.total_price,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            pet=PetResponse.from_domain(booking.pet) if booking.pet else None,
            provider=(
                ProviderResponse.from_domain(booking.provider)
                if booking.provider
                else None
            ),
            service=(
                ServiceResponse.from_domain(booking.service) if booking.service else None
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "pet_id": self.pet_id,
            "provider_id": self.provider_id,
            "service_id": self.service_id,
            "booking_date": _iso(self.booking_date),
            "booking_time": self.booking_time,
            "status": self.status,
            "notes": self.notes,
            "total_price": self.total_price,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "pet": self.pet.to_dict() if self.pet else None,
            "provider": self.provider.to_dict() if self.provider else None,
            "service": self.service.to_dict() if self.service else None,
        }


@dataclass
class ErrorResponse:
    """DTO for error responses."""

    error: str
    message: str
    details: Optional[dict] = None

    @classmethod
    def from_exception(cls, exc) -> "ErrorResponse":
        """Create error response from a core exception."""
        return cls(error=exc.error_code, message=exc.message, details=exc.to_details() or None)

    @classmethod
    def not_found(cls, resource: str) -> "ErrorResponse":
        """Create not found error response."""
        return cls(error="not_found", message=f"{resource} not found")

    @classmethod
    def server_error(cls, message: str = "Internal server error") -> "ErrorResponse":
        """Create server error response."""
        return cls(error="server_error", message=message)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload
