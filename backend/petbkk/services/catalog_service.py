"""
Catalog service: listing and filtering providers and services.

The catalog is read-only reference data; nothing here mutates storage.
"""

import time
from datetime import date
from typing import List, Optional

from petbkk.core.logging_config import get_logger, log_performance
from petbkk.domain.entities import PROVIDER_TYPES, Provider, Service, require_choice
from petbkk.domain.interfaces import IProviderReader, IServiceReader
from petbkk.domain.slots import generate_time_slots, slots_within_hours

logger = get_logger(__name__)

ALL_TYPES = "all"


class CatalogService:
    """Application service for the provider/service catalog."""

    def __init__(
        self,
        provider_repo: IProviderReader,
        service_repo: IServiceReader,
        enforce_opening_hours: bool = False,
    ):
        self.provider_repo = provider_repo
        self.service_repo = service_repo
        self.enforce_opening_hours = enforce_opening_hours

    def list_providers(
        self, type_filter: Optional[str] = None, search_text: Optional[str] = None
    ) -> List[Provider]:
        """List providers, best rated first.

        type_filter restricts to one business_type ("all" or None means no
        restriction). search_text matches business_name OR district,
        case-insensitively. Both filters combine with AND.
        """
        started = time.perf_counter()

        if type_filter in (None, "", ALL_TYPES):
            type_filter = None
        else:
            require_choice("business_type", type_filter, PROVIDER_TYPES)

        providers = [
            provider
            for provider in self.provider_repo.get_all(type_filter)
            if type_filter is None or provider.business_type == type_filter
        ]

        needle = (search_text or "").strip().lower()
        if needle:
            providers = [
                provider
                for provider in providers
                if needle in provider.business_name.lower()
                or needle in provider.district.lower()
            ]

        # sort is stable: ties keep catalog order
        providers.sort(key=lambda p: p.rating, reverse=True)

        log_performance(
            "list_providers",
            (time.perf_counter() - started) * 1000,
            type_filter=type_filter or ALL_TYPES,
            search=bool(needle),
            record_count=len(providers),
        )
        return providers

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        """Provider with its full service collection, or None."""
        return self.provider_repo.get_by_id(provider_id)

    def list_services(self, provider_id: str) -> List[Service]:
        """All services of a provider, including unavailable ones."""
        return self.service_repo.get_by_provider(provider_id)

    def get_service(self, service_id: str) -> Optional[Service]:
        return self.service_repo.get_by_id(service_id)

    def available_slots(
        self,
        provider_id: str,
        booking_date: date,
        service_id: Optional[str] = None,
    ) -> Optional[List[str]]:
        """Bookable times for a provider on a date.

        Returns the static grid unless opening hours are enforced, in which
        case the grid is narrowed to the provider's hours for that weekday
        (and to the service duration when service_id is given).
        Returns None for an unknown provider.
        """
        provider = self.provider_repo.get_by_id(provider_id)
        if not provider:
            return None

        slots = generate_time_slots()
        if not self.enforce_opening_hours:
            return slots

        duration = 0
        if service_id:
            service = self.service_repo.get_by_id(service_id)
            if service and service.provider_id == provider.id:
                duration = service.duration_minutes
        return slots_within_hours(slots, provider.hours_on(booking_date), duration)
