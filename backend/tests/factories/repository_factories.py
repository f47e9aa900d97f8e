"""
Repository test factories following Interface Segregation Principle.

This module provides mock factories for repository interfaces, ensuring
tests only depend on the specific interfaces they need.
"""

from unittest.mock import Mock

from petbkk.domain.interfaces import (
    IBookingReader,
    IBookingRepository,
    IPetReader,
    IPetRepository,
    IProfileRepository,
    IProviderReader,
    IServiceReader,
)


class ProfileRepositoryFactory:
    """Factory for creating Profile repository mocks."""

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IProfileRepository."""
        mock_repo = Mock(spec=IProfileRepository)

        mock_repo.get.return_value = None
        mock_repo.get_by_phone.return_value = None
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None

        return mock_repo


class PetRepositoryFactory:
    """Factory for creating Pet repository mocks following Interface Segregation."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements IPetReader operations."""
        mock_reader = Mock(spec=IPetReader)

        mock_reader.get_all_by_owner.return_value = []
        mock_reader.get_by_id.return_value = None

        return mock_reader

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IPetRepository."""
        mock_repo = Mock(spec=IPetRepository)

        # Set up default return values for read operations
        mock_repo.get_all_by_owner.return_value = []
        mock_repo.get_by_id.return_value = None

        # Set up default return values for write operations
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None
        mock_repo.delete.return_value = False

        return mock_repo


class BookingRepositoryFactory:
    """Factory for creating Booking repository mocks following Interface Segregation."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements IBookingReader operations."""
        mock_reader = Mock(spec=IBookingReader)

        mock_reader.get_all_by_user.return_value = []
        mock_reader.get_by_id.return_value = None
        mock_reader.count_active_at_slot.return_value = 0
        mock_reader.count_by_user.return_value = 0

        return mock_reader

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IBookingRepository."""
        mock_repo = Mock(spec=IBookingRepository)

        # Set up default return values for read operations
        mock_repo.get_all_by_user.return_value = []
        mock_repo.get_by_id.return_value = None
        mock_repo.count_active_at_slot.return_value = 0
        mock_repo.count_by_user.return_value = 0

        # Set up default return values for write operations
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None

        return mock_repo


class CatalogRepositoryFactory:
    """Factory for the read-only provider and service repositories."""

    @staticmethod
    def create_provider_reader() -> Mock:
        mock_reader = Mock(spec=IProviderReader)
        mock_reader.get_all.return_value = []
        mock_reader.get_by_id.return_value = None
        return mock_reader

    @staticmethod
    def create_service_reader() -> Mock:
        mock_reader = Mock(spec=IServiceReader)
        mock_reader.get_by_provider.return_value = []
        mock_reader.get_by_id.return_value = None
        return mock_reader
