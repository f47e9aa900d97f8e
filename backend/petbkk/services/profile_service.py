"""
Profile service: sign-in bookkeeping, profile edits and home-screen stats.

OTP delivery and verification happen upstream; this service only sees a
phone number that has already been verified.
"""

import re
from typing import Dict, Optional

from petbkk.core.exceptions import NotAuthenticatedError, ValidationError
from petbkk.core.logging_config import get_logger
from petbkk.domain.entities import Profile
from petbkk.domain.interfaces import (
    IBookingReader,
    IPetReader,
    IProfileRepository,
)
from petbkk.schemas.dtos import ProfileUpdateRequest

logger = get_logger(__name__)

COUNTRY_CODE = "66"
_SEPARATORS = re.compile(r"[\s\-().]")
_LOCAL_NUMBER = re.compile(r"^0(\d{9})$")
_NATIONAL_NUMBER = re.compile(r"^(\d{9})$")
_E164_NUMBER = re.compile(r"^\+66(\d{9})$")


def normalize_phone(raw: Optional[str]) -> str:
    """Normalize a Thai mobile number to E.164 (+66XXXXXXXXX).

    Accepts "0812345678", "812345678" and "+66812345678", with spaces,
    dashes or parentheses.
    """
    value = _SEPARATORS.sub("", raw or "")
    for pattern in (_E164_NUMBER, _LOCAL_NUMBER, _NATIONAL_NUMBER):
        match = pattern.match(value)
        if match:
            return f"+{COUNTRY_CODE}{match.group(1)}"
    raise ValidationError(
        "phone", "Please enter a valid Thai phone number (e.g., 0812345678)"
    )


class ProfileService:
    def __init__(
        self,
        profile_repo: IProfileRepository,
        pet_repo: IPetReader,
        booking_repo: IBookingReader,
    ):
        self.profile_repo = profile_repo
        self.pet_repo = pet_repo
        self.booking_repo = booking_repo

    def sign_in(self, phone: str) -> Profile:
        """Return the profile for a verified phone, creating it on first sign-in."""
        normalized = normalize_phone(phone)

        profile = self.profile_repo.get_by_phone(normalized)
        if profile:
            return profile

        profile = self.profile_repo.create(normalized)
        logger.info("Profile created", extra={"context": {"profile_id": profile.id}})
        return profile

    def get_profile(self, user_id: Optional[str]) -> Optional[Profile]:
        if not user_id:
            raise NotAuthenticatedError()
        return self.profile_repo.get(user_id)

    def update_profile(
        self, user_id: Optional[str], request: ProfileUpdateRequest
    ) -> Optional[Profile]:
        if not user_id:
            raise NotAuthenticatedError()
        request.validate()

        changes = request.changes()
        if not changes:
            return self.profile_repo.get(user_id)
        return self.profile_repo.update(user_id, changes)

    def get_stats(self, user_id: Optional[str]) -> Dict[str, int]:
        """Pet and booking counts shown on the home screen."""
        if not user_id:
            raise NotAuthenticatedError()
        return {
            "pet_count": len(self.pet_repo.get_all_by_owner(user_id)),
            "booking_count": self.booking_repo.count_by_user(user_id),
        }
