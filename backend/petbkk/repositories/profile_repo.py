import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from petbkk.core.config import utc_now
from petbkk.core.exceptions import ValidationError
from petbkk.db.base import Profile as DbProfile
from petbkk.db.session import ensure_utc, session_scope
from petbkk.domain.entities import Profile as DomainProfile
from petbkk.domain.interfaces import IProfileRepository

PROFILE_FIELDS = ("display_name", "avatar_url")


class ProfileRepository(IProfileRepository):
    """Repository for Profile persistence operations following SOLID principles.

    This implementation:
    - Implements IProfileRepository interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Maps between domain entities and database models
    """

    def __init__(self, session_factory=None, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def get(self, user_id: str) -> Optional[DomainProfile]:
        """Get profile by ID, returning domain entity."""
        with session_scope(self.session_factory) as db:
            db_profile = db.get(DbProfile, user_id)
            return self._to_domain(db_profile) if db_profile else None

    def get_by_phone(self, phone: str) -> Optional[DomainProfile]:
        with session_scope(self.session_factory) as db:
            db_profile = db.query(DbProfile).filter_by(phone=phone).first()
            return self._to_domain(db_profile) if db_profile else None

    def create(self, phone: str) -> DomainProfile:
        """Create a profile for a phone number that has none yet."""
        with session_scope(self.session_factory) as db:
            if db.query(DbProfile).filter_by(phone=phone).first():
                raise ValidationError("phone", "A profile already exists for this phone")

            now = self.clock()
            db_profile = DbProfile(
                id=str(uuid.uuid4()), phone=phone, created_at=now, updated_at=now
            )
            db.add(db_profile)
            db.flush()
            return self._to_domain(db_profile)

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[DomainProfile]:
        """Apply display_name/avatar_url changes; other keys are ignored."""
        with session_scope(self.session_factory) as db:
            db_profile = db.get(DbProfile, user_id)
            if not db_profile:
                return None

            for name in PROFILE_FIELDS:
                if name in fields:
                    setattr(db_profile, name, fields[name])
            db_profile.updated_at = self.clock()
            db.flush()
            return self._to_domain(db_profile)

    @staticmethod
    def _to_domain(db_profile: DbProfile) -> DomainProfile:
        """Convert database model to domain entity."""
        return DomainProfile(
            id=db_profile.id,
            phone=db_profile.phone,
            display_name=db_profile.display_name,
            avatar_url=db_profile.avatar_url,
            created_at=ensure_utc(db_profile.created_at),
            updated_at=ensure_utc(db_profile.updated_at),
        )
