"""
Unit tests for the in-process store and its JSON write-through.
"""

import json
import time
from datetime import date

import pytest

from petbkk.core.exceptions import SlotUnavailableError, StorageError, ValidationError
from petbkk.repositories.factory import create_memory_repositories
from petbkk.schemas.dtos import BookingCreateRequest
from tests.config import CatalogIds, TestConfig, TickingClock
from tests.fixtures.concurrency import run_concurrently


def booking_fields(pet_id, status="pending", booking_time="10:00"):
    return {
        "pet_id": pet_id,
        "provider_id": CatalogIds.VET,
        "service_id": CatalogIds.CHECKUP,
        "booking_date": date(2026, 3, 1),
        "booking_time": booking_time,
        "status": status,
        "total_price": 500.0,
    }


@pytest.mark.unit
@pytest.mark.repositories
class TestMemoryRepositories:
    def test_catalog_is_loaded(self, memory_repositories):
        assert len(memory_repositories.providers.get_all()) == 6
        assert len(memory_repositories.providers.get_all("veterinary")) == 1
        assert memory_repositories.services.get_by_id(CatalogIds.DENTAL).is_available is False

    def test_duplicate_phone_is_rejected(self, memory_repositories, profile):
        with pytest.raises(ValidationError) as exc_info:
            memory_repositories.profiles.create(TestConfig.SAMPLE_PHONE)

        assert exc_info.value.field == "phone"

    def test_reads_are_copies(self, memory_repositories, pet):
        copy = memory_repositories.pets.get_by_id(pet.id)
        copy.name = "Changed"

        assert memory_repositories.pets.get_by_id(pet.id).name == "Mochi"

    def test_timestamps_come_from_store_clock(self, memory_repositories, profile):
        assert profile.created_at == TestConfig.STORE_EPOCH
        assert profile.created_at == profile.updated_at

    def test_count_active_at_slot_ignores_terminal(self, memory_repositories, profile, pet):
        bookings = memory_repositories.bookings
        bookings.create(profile.id, booking_fields(pet.id))
        bookings.create(profile.id, booking_fields(pet.id, status="confirmed"))
        bookings.create(profile.id, booking_fields(pet.id, status="cancelled"))
        bookings.create(profile.id, booking_fields(pet.id, booking_time="10:30"))

        assert bookings.count_active_at_slot(CatalogIds.VET, date(2026, 3, 1), "10:00") == 2
        assert bookings.count_by_user(profile.id) == 4

    def test_deleted_pet_hydrates_as_none(self, memory_repositories, profile, pet):
        booking = memory_repositories.bookings.create(profile.id, booking_fields(pet.id))

        memory_repositories.pets.delete(pet.id)
        reloaded = memory_repositories.bookings.get_by_id(booking.id)

        assert reloaded.pet_id == pet.id
        assert reloaded.pet is None
        assert reloaded.service.id == CatalogIds.CHECKUP

    def test_update_missing_rows(self, memory_repositories):
        assert memory_repositories.pets.update("missing", {"name": "x"}) is None
        assert memory_repositories.bookings.update("missing", {"status": "confirmed"}) is None
        assert memory_repositories.profiles.update("missing", {"display_name": "x"}) is None

    def test_create_refuses_full_slot(self, memory_repositories, profile, pet):
        bookings = memory_repositories.bookings
        bookings.create(profile.id, booking_fields(pet.id), capacity=1)

        with pytest.raises(SlotUnavailableError) as exc_info:
            bookings.create(profile.id, booking_fields(pet.id), capacity=1)

        assert exc_info.value.booking_date == "2026-03-01"
        assert bookings.count_by_user(profile.id) == 1

    def test_cancelled_booking_frees_capacity(self, memory_repositories, profile, pet):
        bookings = memory_repositories.bookings
        bookings.create(profile.id, booking_fields(pet.id, status="cancelled"), capacity=1)

        booking = bookings.create(profile.id, booking_fields(pet.id), capacity=1)

        assert booking.status == "pending"

    def test_concurrent_creates_respect_capacity(
        self, monkeypatch, container, profile, pet
    ):
        store = container.repositories.bookings.store
        write = store.write

        def slow_write(collection, key, value):
            # Widen the gap between counting the slot and storing the row.
            time.sleep(0.05)
            write(collection, key, value)

        monkeypatch.setattr(store, "write", slow_write)
        container.bookings.slot_capacity = 1
        request = BookingCreateRequest(
            pet_id=pet.id,
            provider_id=CatalogIds.VET,
            service_id=CatalogIds.CHECKUP,
            booking_date=date(2026, 3, 1),
            booking_time="10:00",
        )

        outcomes = run_concurrently(
            lambda: container.bookings.create_booking(profile.id, request),
            workers=4,
            expected=(SlotUnavailableError,),
        )

        rejected = [o for o in outcomes if isinstance(o, SlotUnavailableError)]
        assert len(rejected) == 3
        assert (
            container.repositories.bookings.count_active_at_slot(
                CatalogIds.VET, date(2026, 3, 1), "10:00"
            )
            == 1
        )


@pytest.mark.unit
@pytest.mark.repositories
@pytest.mark.database
class TestMemoryStoreFile:
    def test_mutations_are_written_through(self, tmp_path):
        path = tmp_path / "store.json"
        repos = create_memory_repositories(path=str(path), clock=TickingClock())

        profile = repos.profiles.create(TestConfig.SAMPLE_PHONE)
        repos.pets.create(profile.id, {"name": "Mochi", "species": "dog"})

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["version"] == 1
        assert [p["phone"] for p in document["profiles"]] == [TestConfig.SAMPLE_PHONE]
        assert [p["name"] for p in document["pets"]] == ["Mochi"]
        assert "providers" not in document

    def test_state_survives_reload(self, tmp_path):
        path = str(tmp_path / "store.json")
        repos = create_memory_repositories(path=path, clock=TickingClock())
        profile = repos.profiles.create(TestConfig.SAMPLE_PHONE)
        pet = repos.pets.create(
            profile.id, {"name": "Mochi", "species": "dog", "birth_date": date(2022, 5, 1)}
        )
        booking = repos.bookings.create(profile.id, booking_fields(pet.id))

        reloaded = create_memory_repositories(path=path)

        again = reloaded.bookings.get_by_id(booking.id)
        assert again.booking_date == date(2026, 3, 1)
        assert again.created_at == booking.created_at
        assert again.pet.birth_date == date(2022, 5, 1)
        assert reloaded.profiles.get_by_phone(TestConfig.SAMPLE_PHONE).id == profile.id

    def test_missing_file_starts_empty(self, tmp_path):
        repos = create_memory_repositories(path=str(tmp_path / "absent.json"))

        assert repos.profiles.get_by_phone(TestConfig.SAMPLE_PHONE) is None

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            create_memory_repositories(path=str(path))

    def test_failed_write_leaves_state_unchanged(self, tmp_path, memory_repositories, profile):
        store = memory_repositories.profiles.store
        store.path = str(tmp_path / "no-such-dir" / "store.json")

        with pytest.raises(StorageError):
            memory_repositories.pets.create(profile.id, {"name": "Mochi", "species": "dog"})

        assert memory_repositories.pets.get_all_by_owner(profile.id) == []
