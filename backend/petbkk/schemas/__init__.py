from .dtos import (
    BookingCreateRequest,
    BookingResponse,
    ErrorResponse,
    PetCreateRequest,
    PetResponse,
    PetUpdateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ProviderResponse,
    ServiceResponse,
)

__all__ = [
    "BookingCreateRequest",
    "BookingResponse",
    "ErrorResponse",
    "PetCreateRequest",
    "PetResponse",
    "PetUpdateRequest",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ProviderResponse",
    "ServiceResponse",
]
