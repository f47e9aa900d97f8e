"""
Unit tests for ProfileService and phone normalization.
"""

from datetime import date

import pytest

from petbkk.core.exceptions import NotAuthenticatedError, ValidationError
from petbkk.schemas.dtos import ProfileUpdateRequest
from petbkk.services.profile_service import ProfileService, normalize_phone
from tests.config import CatalogIds, TestConfig
from tests.factories.repository_factories import (
    BookingRepositoryFactory,
    PetRepositoryFactory,
    ProfileRepositoryFactory,
)
from tests.fixtures.domain_fixtures import make_profile


@pytest.mark.unit
@pytest.mark.profile
class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw",
        [
            "0812345678",
            "081-234-5678",
            "081 234 5678",
            "(081) 234-5678",
            "812345678",
            "+66812345678",
            "+66 81 234 5678",
        ],
    )
    def test_accepted_formats(self, raw):
        assert normalize_phone(raw) == TestConfig.SAMPLE_PHONE

    @pytest.mark.parametrize("raw", [None, "", "12345", "+1 555 123 4567", "08123456789"])
    def test_rejected_formats(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_phone(raw)

        assert exc_info.value.field == "phone"


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.profile
class TestProfileServiceWithMocks:
    @pytest.fixture
    def repos(self):
        return (
            ProfileRepositoryFactory.create_mock_full(),
            PetRepositoryFactory.create_mock_reader(),
            BookingRepositoryFactory.create_mock_reader(),
        )

    @pytest.fixture
    def service(self, repos):
        return ProfileService(*repos)

    def test_sign_in_returns_existing_profile(self, service, repos):
        profile_repo = repos[0]
        profile_repo.get_by_phone.return_value = make_profile()

        profile = service.sign_in("0812345678")

        assert profile.id == "u1"
        profile_repo.get_by_phone.assert_called_once_with(TestConfig.SAMPLE_PHONE)
        profile_repo.create.assert_not_called()

    def test_sign_in_creates_profile_on_first_visit(self, service, repos):
        profile_repo = repos[0]
        profile_repo.create.return_value = make_profile(id="u-new")

        assert service.sign_in("0812345678").id == "u-new"
        profile_repo.create.assert_called_once_with(TestConfig.SAMPLE_PHONE)

    def test_invalid_phone_never_reaches_storage(self, service, repos):
        with pytest.raises(ValidationError):
            service.sign_in("not a phone")

        repos[0].get_by_phone.assert_not_called()

    def test_stats(self, service, repos):
        _, pet_repo, booking_repo = repos
        pet_repo.get_all_by_owner.return_value = [object(), object()]
        booking_repo.count_by_user.return_value = 3

        assert service.get_stats("u1") == {"pet_count": 2, "booking_count": 3}

    def test_requires_authentication(self, service):
        with pytest.raises(NotAuthenticatedError):
            service.get_profile(None)
        with pytest.raises(NotAuthenticatedError):
            service.get_stats(None)
        with pytest.raises(NotAuthenticatedError):
            service.update_profile(None, ProfileUpdateRequest(display_name="x"))


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.profile
class TestProfileServiceMemory:
    def test_sign_in_is_idempotent(self, container):
        first = container.profiles.sign_in("0812345678")
        second = container.profiles.sign_in("+66 81 234 5678")

        assert first.id == second.id
        assert first.phone == TestConfig.SAMPLE_PHONE

    def test_update_display_name(self, container, profile):
        updated = container.profiles.update_profile(
            profile.id, ProfileUpdateRequest(display_name="Somchai")
        )

        assert updated.display_name == "Somchai"
        assert updated.phone == profile.phone
        assert updated.updated_at > profile.updated_at

    def test_update_without_changes(self, container, profile):
        unchanged = container.profiles.update_profile(profile.id, ProfileUpdateRequest())

        assert unchanged.updated_at == profile.updated_at

    def test_stats_count_pets_and_bookings(self, container, profile, pet, memory_repositories):
        memory_repositories.bookings.create(
            profile.id,
            {
                "pet_id": pet.id,
                "provider_id": CatalogIds.VET,
                "service_id": CatalogIds.CHECKUP,
                "booking_date": date(2026, 3, 1),
                "booking_time": "10:00",
                "status": "cancelled",
                "total_price": 500.0,
            },
        )

        assert container.profiles.get_stats(profile.id) == {
            "pet_count": 1,
            "booking_count": 1,
        }
