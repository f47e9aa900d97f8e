"""
Pet service: manages a profile's pets.

Every read and write is scoped to the owner; another owner's pet is
reported exactly like a missing one.
"""

from datetime import date, datetime
from typing import Callable, List, Optional

from petbkk.core.config import market_now
from petbkk.core.exceptions import NotAuthenticatedError
from petbkk.core.logging_config import get_logger
from petbkk.domain.entities import Pet
from petbkk.domain.interfaces import IPetRepository
from petbkk.schemas.dtos import PetCreateRequest, PetUpdateRequest

logger = get_logger(__name__)


class PetService:
    def __init__(
        self, pet_repo: IPetRepository, clock: Callable[[], datetime] = market_now
    ):
        self.pet_repo = pet_repo
        self.clock = clock

    def _today(self) -> date:
        return self.clock().date()

    def list_pets(self, owner_id: Optional[str]) -> List[Pet]:
        """Owner's pets, newest first."""
        self._require_owner(owner_id)
        pets = [p for p in self.pet_repo.get_all_by_owner(owner_id) if p.owner_id == owner_id]
        pets.sort(
            key=lambda p: p.created_at.timestamp() if p.created_at else 0.0,
            reverse=True,
        )
        return pets

    def get_pet(self, pet_id: str, owner_id: Optional[str]) -> Optional[Pet]:
        self._require_owner(owner_id)
        pet = self.pet_repo.get_by_id(pet_id)
        if not pet or pet.owner_id != owner_id:
            return None
        return pet

    def add_pet(self, owner_id: Optional[str], request: PetCreateRequest) -> Pet:
        self._require_owner(owner_id)
        request.validate(today=self._today())

        pet = self.pet_repo.create(owner_id, request.to_fields())
        logger.info(
            "Pet added",
            extra={"context": {"pet_id": pet.id, "owner_id": owner_id, "species": pet.species}},
        )
        return pet

    def update_pet(
        self, pet_id: str, owner_id: Optional[str], request: PetUpdateRequest
    ) -> Optional[Pet]:
        if not self.get_pet(pet_id, owner_id):
            return None
        request.validate(today=self._today())

        changes = request.changes()
        if not changes:
            return self.pet_repo.get_by_id(pet_id)

        updated = self.pet_repo.update(pet_id, changes)
        logger.info(
            "Pet updated",
            extra={"context": {"pet_id": pet_id, "fields": sorted(changes)}},
        )
        return updated

    def delete_pet(self, pet_id: str, owner_id: Optional[str]) -> bool:
        """Delete a pet. Its bookings keep pet_id and hydrate with pet=None."""
        if not self.get_pet(pet_id, owner_id):
            return False

        deleted = self.pet_repo.delete(pet_id)
        if deleted:
            logger.info(
                "Pet removed", extra={"context": {"pet_id": pet_id, "owner_id": owner_id}}
            )
        return deleted

    @staticmethod
    def _require_owner(owner_id: Optional[str]) -> None:
        if not owner_id:
            raise NotAuthenticatedError()
