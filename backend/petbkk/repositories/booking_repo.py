import threading
import uuid
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from petbkk.core.config import utc_now
from petbkk.core.exceptions import SlotUnavailableError
from petbkk.db.base import Booking as DbBooking
from petbkk.db.base import Pet as DbPet
from petbkk.db.base import Provider as DbProvider
from petbkk.db.base import Service as DbService
from petbkk.db.session import ensure_utc, session_scope
from petbkk.domain import lifecycle
from petbkk.domain.entities import Booking as DomainBooking
from petbkk.domain.interfaces import IBookingRepository
from petbkk.repositories.catalog_repo import provider_to_domain, service_to_domain
from petbkk.repositories.pet_repo import PetRepository

BOOKING_FIELDS = (
    "pet_id",
    "provider_id",
    "service_id",
    "booking_date",
    "booking_time",
    "status",
    "notes",
    "total_price",
)


class BookingRepository(IBookingRepository):
    """Repository for Booking persistence operations.

    Reads are hydrated with the pet, provider and service rows. The pet
    is looked up without a join so a deleted pet yields ``pet=None``.
    """

    def __init__(self, session_factory=None, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock
        self._create_lock = threading.Lock()

    def get_all_by_user(self, user_id: str) -> List[DomainBooking]:
        with session_scope(self.session_factory) as db:
            rows = (
                db.query(DbBooking)
                .filter_by(user_id=user_id)
                .order_by(DbBooking.booking_date, DbBooking.booking_time)
                .all()
            )
            return [self._to_domain(db, row) for row in rows]

    def get_by_id(self, booking_id: str) -> Optional[DomainBooking]:
        with session_scope(self.session_factory) as db:
            db_booking = db.get(DbBooking, booking_id)
            return self._to_domain(db, db_booking) if db_booking else None

    @staticmethod
    def _active_at_slot(db, provider_id: str, booking_date: date, booking_time: str):
        return db.query(DbBooking).filter(
            DbBooking.provider_id == provider_id,
            DbBooking.booking_date == booking_date,
            DbBooking.booking_time == booking_time,
            DbBooking.status.notin_(lifecycle.TERMINAL_STATUSES),
        )

    def count_active_at_slot(
        self, provider_id: str, booking_date: date, booking_time: str
    ) -> int:
        with session_scope(self.session_factory) as db:
            return self._active_at_slot(
                db, provider_id, booking_date, booking_time
            ).count()

    def count_by_user(self, user_id: str) -> int:
        with session_scope(self.session_factory) as db:
            return db.query(DbBooking).filter_by(user_id=user_id).count()

    def create(
        self, user_id: str, fields: Dict[str, Any], capacity: int = 0
    ) -> DomainBooking:
        """Insert one booking row in a single transaction.

        With a capacity the provider row is locked ``FOR UPDATE`` before the
        slot is counted, so concurrent creates for one provider queue up on
        Postgres. SQLite drops the clause; ``_create_lock`` serializes
        creates inside the process there.
        """
        now = self.clock()
        booking = DomainBooking(id=str(uuid.uuid4()), user_id=user_id, **fields)

        with self._create_lock, session_scope(self.session_factory) as db:
            if capacity > 0:
                db.query(DbProvider).filter_by(
                    id=booking.provider_id
                ).with_for_update().one_or_none()
                taken = self._active_at_slot(
                    db, booking.provider_id, booking.booking_date, booking.booking_time
                ).count()
                if taken >= capacity:
                    raise SlotUnavailableError(
                        booking.provider_id,
                        booking.booking_date.isoformat(),
                        booking.booking_time,
                    )

            db_booking = DbBooking(
                id=booking.id,
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **{name: getattr(booking, name) for name in BOOKING_FIELDS},
            )
            db.add(db_booking)
            db.flush()
            return self._to_domain(db, db_booking)

    def update(self, booking_id: str, fields: Dict[str, Any]) -> Optional[DomainBooking]:
        with session_scope(self.session_factory) as db:
            db_booking = db.get(DbBooking, booking_id)
            if not db_booking:
                return None

            for name, value in fields.items():
                if name in BOOKING_FIELDS:
                    setattr(db_booking, name, value)
            db_booking.updated_at = self.clock()
            db.flush()
            return self._to_domain(db, db_booking)

    @staticmethod
    def _to_domain(db, db_booking: DbBooking) -> DomainBooking:
        """Convert database model to a hydrated domain entity."""
        db_pet = db.get(DbPet, db_booking.pet_id)
        db_provider = db.get(DbProvider, db_booking.provider_id)
        db_service = db.get(DbService, db_booking.service_id)

        return DomainBooking(
            id=db_booking.id,
            user_id=db_booking.user_id,
            pet_id=db_booking.pet_id,
            provider_id=db_booking.provider_id,
            service_id=db_booking.service_id,
            booking_date=db_booking.booking_date,
            booking_time=db_booking.booking_time,
            status=db_booking.status,
            notes=db_booking.notes,
            total_price=db_booking.total_price,
            created_at=ensure_utc(db_booking.created_at),
            updated_at=ensure_utc(db_booking.updated_at),
            pet=PetRepository._to_domain(db_pet) if db_pet else None,
            provider=provider_to_domain(db_provider) if db_provider else None,
            service=service_to_domain(db_service) if db_service else None,
        )
