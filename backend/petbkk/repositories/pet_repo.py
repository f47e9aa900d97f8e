import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from petbkk.core.config import utc_now
from petbkk.db.base import Pet as DbPet
from petbkk.db.session import ensure_utc, session_scope
from petbkk.domain.entities import Pet as DomainPet
from petbkk.domain.interfaces import IPetRepository

PET_FIELDS = (
    "name",
    "species",
    "breed",
    "gender",
    "birth_date",
    "weight",
    "color",
    "photo_url",
    "notes",
)


class PetRepository(IPetRepository):
    def __init__(self, session_factory=None, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def get_all_by_owner(self, owner_id: str) -> List[DomainPet]:
        with session_scope(self.session_factory) as db:
            rows = (
                db.query(DbPet)
                .filter_by(owner_id=owner_id)
                .order_by(DbPet.created_at.desc())
                .all()
            )
            return [self._to_domain(row) for row in rows]

    def get_by_id(self, pet_id: str) -> Optional[DomainPet]:
        with session_scope(self.session_factory) as db:
            db_pet = db.get(DbPet, pet_id)
            return self._to_domain(db_pet) if db_pet else None

    def create(self, owner_id: str, fields: Dict[str, Any]) -> DomainPet:
        now = self.clock()
        # Validate through the entity before touching the database
        pet = DomainPet(id=str(uuid.uuid4()), owner_id=owner_id, **fields)

        with session_scope(self.session_factory) as db:
            db_pet = DbPet(
                id=pet.id,
                owner_id=owner_id,
                created_at=now,
                updated_at=now,
                **{name: getattr(pet, name) for name in PET_FIELDS},
            )
            db.add(db_pet)
            db.flush()
            return self._to_domain(db_pet)

    def update(self, pet_id: str, fields: Dict[str, Any]) -> Optional[DomainPet]:
        with session_scope(self.session_factory) as db:
            db_pet = db.get(DbPet, pet_id)
            if not db_pet:
                return None

            current = self._to_domain(db_pet)
            merged = {name: getattr(current, name) for name in PET_FIELDS}
            merged.update({k: v for k, v in fields.items() if k in PET_FIELDS})
            DomainPet(id=pet_id, owner_id=current.owner_id, **merged)

            for name, value in merged.items():
                setattr(db_pet, name, value)
            db_pet.updated_at = self.clock()
            db.flush()
            return self._to_domain(db_pet)

    def delete(self, pet_id: str) -> bool:
        with session_scope(self.session_factory) as db:
            db_pet = db.get(DbPet, pet_id)
            if not db_pet:
                return False
            db.delete(db_pet)
            return True

    @staticmethod
    def _to_domain(db_pet: DbPet) -> DomainPet:
        """Convert database model to domain entity."""
        return DomainPet(
            id=db_pet.id,
            owner_id=db_pet.owner_id,
            name=db_pet.name,
            species=db_pet.species,
            breed=db_pet.breed,
            gender=db_pet.gender,
            birth_date=db_pet.birth_date,
            weight=db_pet.weight,
            color=db_pet.color,
            photo_url=db_pet.photo_url,
            notes=db_pet.notes,
            created_at=ensure_utc(db_pet.created_at),
            updated_at=ensure_utc(db_pet.updated_at),
        )
