"""
In-process persistence adapter (the local mock store).

All state lives in one ``MemoryStore`` guarded by a lock, so a single
mutation is atomic with respect to other threads. When a file path is
configured the user-owned collections (profiles, pets, bookings) are
written through to a JSON document after every mutation; if that write
fails the mutation is discarded and ``StorageError`` is raised.

The provider/service catalog is reference data and is never persisted.
"""

import copy
import json
import os
import threading
import uuid
from dataclasses import asdict, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from petbkk.core.config import utc_now
from petbkk.core.exceptions import SlotUnavailableError, StorageError, ValidationError
from petbkk.core.logging_config import get_logger
from petbkk.data.catalog import build_catalog
from petbkk.domain import lifecycle
from petbkk.domain.entities import Booking, Pet, Profile, Provider, Service
from petbkk.domain.interfaces import (
    IBookingRepository,
    IPetRepository,
    IProfileRepository,
    IProviderReader,
    IServiceReader,
)

logger = get_logger(__name__)

STORE_VERSION = 1
_HYDRATED_FIELDS = ("pet", "provider", "service")


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _profile_from_dict(data: Dict[str, Any]) -> Profile:
    data = dict(data)
    data["created_at"] = _parse_datetime(data.get("created_at"))
    data["updated_at"] = _parse_datetime(data.get("updated_at"))
    return Profile(**data)


def _pet_from_dict(data: Dict[str, Any]) -> Pet:
    data = dict(data)
    data["birth_date"] = _parse_date(data.get("birth_date"))
    data["created_at"] = _parse_datetime(data.get("created_at"))
    data["updated_at"] = _parse_datetime(data.get("updated_at"))
    return Pet(**data)


def _booking_from_dict(data: Dict[str, Any]) -> Booking:
    data = {k: v for k, v in data.items() if k not in _HYDRATED_FIELDS}
    data["booking_date"] = _parse_date(data.get("booking_date"))
    data["created_at"] = _parse_datetime(data.get("created_at"))
    data["updated_at"] = _parse_datetime(data.get("updated_at"))
    return Booking(**data)


def _booking_to_dict(booking: Booking) -> Dict[str, Any]:
    data = asdict(booking)
    for name in _HYDRATED_FIELDS:
        data.pop(name, None)
    return data


class MemoryStore:
    """Shared state for the memory repositories."""

    def __init__(
        self,
        path: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
        catalog: Optional[List[Provider]] = None,
    ):
        self.path = path
        self.clock = clock
        self.lock = threading.RLock()

        self.profiles: Dict[str, Profile] = {}
        self.pets: Dict[str, Pet] = {}
        self.bookings: Dict[str, Booking] = {}

        self.providers: Dict[str, Provider] = {
            p.id: p for p in (catalog if catalog is not None else build_catalog())
        }
        self.services: Dict[str, Service] = {
            s.id: s for p in self.providers.values() for s in p.services
        }

        if path:
            self._load()

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def read(self, fn: Callable[["MemoryStore"], Any]) -> Any:
        """Run fn against a consistent view; the result is deep-copied."""
        with self.lock:
            return copy.deepcopy(fn(self))

    def write(self, collection: str, key: str, value: Optional[Any]) -> None:
        """Insert, replace or (value=None) remove one entity, then persist.

        The in-memory state only changes after the file write succeeds.
        """
        with self.lock:
            current: Dict[str, Any] = getattr(self, collection)
            staged = dict(current)
            if value is None:
                staged.pop(key, None)
            else:
                staged[key] = value

            if self.path:
                self._save({**self._snapshot(), collection: staged})
            setattr(self, collection, staged)

    def _snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {
            "profiles": self.profiles,
            "pets": self.pets,
            "bookings": self.bookings,
        }

    def _save(self, state: Dict[str, Dict[str, Any]]) -> None:
        document = {
            "version": STORE_VERSION,
            "profiles": [asdict(p) for p in state["profiles"].values()],
            "pets": [asdict(p) for p in state["pets"].values()],
            "bookings": [_booking_to_dict(b) for b in state["bookings"].values()],
        }
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(document, fh, default=_json_default, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(
                "Failed to persist memory store",
                extra={"context": {"path": self.path, "error": str(e)}},
            )
            raise StorageError(f"Could not write store file: {e}") from e

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.info(
                "Memory store file not found, starting empty",
                extra={"context": {"path": self.path}},
            )
            return

        try:
            with open(self.path, encoding="utf-8") as fh:
                document = json.load(fh)
            profiles = [_profile_from_dict(d) for d in document.get("profiles", [])]
            pets = [_pet_from_dict(d) for d in document.get("pets", [])]
            bookings = [_booking_from_dict(d) for d in document.get("bookings", [])]
        except (OSError, ValueError, TypeError) as e:
            raise StorageError(f"Could not read store file: {e}") from e

        self.profiles = {p.id: p for p in profiles}
        self.pets = {p.id: p for p in pets}
        self.bookings = {b.id: b for b in bookings}
        logger.info(
            "Memory store loaded",
            extra={
                "context": {
                    "path": self.path,
                    "profiles": len(profiles),
                    "pets": len(pets),
                    "bookings": len(bookings),
                }
            },
        )


class MemoryProfileRepository(IProfileRepository):
    def __init__(self, store: MemoryStore):
        self.store = store

    def get(self, user_id: str) -> Optional[Profile]:
        return self.store.read(lambda s: s.profiles.get(user_id))

    def get_by_phone(self, phone: str) -> Optional[Profile]:
        return self.store.read(
            lambda s: next((p for p in s.profiles.values() if p.phone == phone), None)
        )

    def create(self, phone: str) -> Profile:
        with self.store.lock:
            if self.get_by_phone(phone):
                raise ValidationError("phone", "A profile already exists for this phone")
            now = self.store.clock()
            profile = Profile(
                id=self.store.new_id(), phone=phone, created_at=now, updated_at=now
            )
            self.store.write("profiles", profile.id, profile)
        return copy.deepcopy(profile)

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        with self.store.lock:
            profile = self.store.profiles.get(user_id)
            if not profile:
                return None
            updated = replace(profile, **fields, updated_at=self.store.clock())
            self.store.write("profiles", user_id, updated)
        return copy.deepcopy(updated)


class MemoryPetRepository(IPetRepository):
    def __init__(self, store: MemoryStore):
        self.store = store

    def get_all_by_owner(self, owner_id: str) -> List[Pet]:
        return self.store.read(
            lambda s: [p for p in s.pets.values() if p.owner_id == owner_id]
        )

    def get_by_id(self, pet_id: str) -> Optional[Pet]:
        return self.store.read(lambda s: s.pets.get(pet_id))

    def create(self, owner_id: str, fields: Dict[str, Any]) -> Pet:
        now = self.store.clock()
        pet = Pet(
            id=self.store.new_id(),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self.store.write("pets", pet.id, pet)
        return copy.deepcopy(pet)

    def update(self, pet_id: str, fields: Dict[str, Any]) -> Optional[Pet]:
        with self.store.lock:
            pet = self.store.pets.get(pet_id)
            if not pet:
                return None
            updated = replace(pet, **fields, updated_at=self.store.clock())
            self.store.write("pets", pet_id, updated)
        return copy.deepcopy(updated)

    def delete(self, pet_id: str) -> bool:
        with self.store.lock:
            if pet_id not in self.store.pets:
                return False
            self.store.write("pets", pet_id, None)
        return True


class MemoryBookingRepository(IBookingRepository):
    """Bookings are returned hydrated; a deleted pet hydrates as None."""

    def __init__(self, store: MemoryStore):
        self.store = store

    @staticmethod
    def _hydrate(store: MemoryStore, booking: Booking) -> Booking:
        return replace(
            booking,
            pet=store.pets.get(booking.pet_id),
            provider=store.providers.get(booking.provider_id),
            service=store.services.get(booking.service_id),
        )

    def get_all_by_user(self, user_id: str) -> List[Booking]:
        return self.store.read(
            lambda s: [
                self._hydrate(s, b) for b in s.bookings.values() if b.user_id == user_id
            ]
        )

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        def lookup(s: MemoryStore) -> Optional[Booking]:
            booking = s.bookings.get(booking_id)
            return self._hydrate(s, booking) if booking else None

        return self.store.read(lookup)

    @staticmethod
    def _active_at_slot(
        store: MemoryStore, provider_id: str, booking_date: date, booking_time: str
    ) -> int:
        return sum(
            1
            for b in store.bookings.values()
            if b.provider_id == provider_id
            and b.booking_date == booking_date
            and b.booking_time == booking_time
            and b.status not in lifecycle.TERMINAL_STATUSES
        )

    def count_active_at_slot(
        self, provider_id: str, booking_date: date, booking_time: str
    ) -> int:
        return self.store.read(
            lambda s: self._active_at_slot(s, provider_id, booking_date, booking_time)
        )

    def count_by_user(self, user_id: str) -> int:
        return self.store.read(
            lambda s: sum(1 for b in s.bookings.values() if b.user_id == user_id)
        )

    def create(
        self, user_id: str, fields: Dict[str, Any], capacity: int = 0
    ) -> Booking:
        # Count and write under one hold of the lock; store.write re-enters it.
        with self.store.lock:
            now = self.store.clock()
            booking = Booking(
                id=self.store.new_id(),
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **fields,
            )
            if capacity > 0 and (
                self._active_at_slot(
                    self.store,
                    booking.provider_id,
                    booking.booking_date,
                    booking.booking_time,
                )
                >= capacity
            ):
                raise SlotUnavailableError(
                    booking.provider_id,
                    booking.booking_date.isoformat(),
                    booking.booking_time,
                )
            self.store.write("bookings", booking.id, booking)
        return self.get_by_id(booking.id)

    def update(self, booking_id: str, fields: Dict[str, Any]) -> Optional[Booking]:
        with self.store.lock:
            booking = self.store.bookings.get(booking_id)
            if not booking:
                return None
            updated = replace(booking, **fields, updated_at=self.store.clock())
            self.store.write("bookings", booking_id, updated)
        return self.get_by_id(booking_id)


class MemoryProviderRepository(IProviderReader):
    def __init__(self, store: MemoryStore):
        self.store = store

    def get_all(self, type_filter: Optional[str] = None) -> List[Provider]:
        return self.store.read(
            lambda s: [
                p
                for p in s.providers.values()
                if type_filter is None or p.business_type == type_filter
            ]
        )

    def get_by_id(self, provider_id: str) -> Optional[Provider]:
        return self.store.read(lambda s: s.providers.get(provider_id))


class MemoryServiceRepository(IServiceReader):
    def __init__(self, store: MemoryStore):
        self.store = store

    def get_by_provider(self, provider_id: str) -> List[Service]:
        def lookup(s: MemoryStore) -> List[Service]:
            provider = s.providers.get(provider_id)
            return list(provider.services) if provider else []

        return self.store.read(lookup)

    def get_by_id(self, service_id: str) -> Optional[Service]:
        return self.store.read(lambda s: s.services.get(service_id))
