"""
Read-only repositories for the provider/service catalog.
"""

from typing import List, Optional

from petbkk.db.base import Provider as DbProvider
from petbkk.db.base import Service as DbService
from petbkk.db.session import ensure_utc, session_scope
from petbkk.domain.entities import DayHours
from petbkk.domain.entities import Provider as DomainProvider
from petbkk.domain.entities import Service as DomainService
from petbkk.domain.interfaces import IProviderReader, IServiceReader


def service_to_domain(db_service: DbService) -> DomainService:
    return DomainService(
        id=db_service.id,
        provider_id=db_service.provider_id,
        name=db_service.name,
        description=db_service.description,
        duration_minutes=db_service.duration_minutes,
        price_min=db_service.price_min,
        price_max=db_service.price_max,
        pet_types=list(db_service.pet_types or []),
        is_available=db_service.is_available,
        created_at=ensure_utc(db_service.created_at),
    )


def provider_to_domain(db_provider: DbProvider) -> DomainProvider:
    return DomainProvider(
        id=db_provider.id,
        business_name=db_provider.business_name,
        business_type=db_provider.business_type,
        description=db_provider.description,
        address=db_provider.address,
        district=db_provider.district,
        province=db_provider.province,
        phone=db_provider.phone,
        email=db_provider.email,
        website=db_provider.website,
        logo_url=db_provider.logo_url,
        rating=db_provider.rating,
        review_count=db_provider.review_count,
        opening_hours={
            day: DayHours(hours["open"], hours["close"]) if hours else None
            for day, hours in (db_provider.opening_hours or {}).items()
        },
        is_verified=db_provider.is_verified,
        created_at=ensure_utc(db_provider.created_at),
        services=[service_to_domain(s) for s in db_provider.services],
    )


class ProviderRepository(IProviderReader):
    def __init__(self, session_factory=None):
        self.session_factory = session_factory

    def get_all(self, type_filter: Optional[str] = None) -> List[DomainProvider]:
        """Providers in catalog (insertion) order, services attached."""
        with session_scope(self.session_factory) as db:
            query = db.query(DbProvider)
            if type_filter:
                query = query.filter_by(business_type=type_filter)
            rows = query.order_by(DbProvider.created_at, DbProvider.id).all()
            return [provider_to_domain(row) for row in rows]

    def get_by_id(self, provider_id: str) -> Optional[DomainProvider]:
        with session_scope(self.session_factory) as db:
            db_provider = db.get(DbProvider, provider_id)
            return provider_to_domain(db_provider) if db_provider else None


class ServiceRepository(IServiceReader):
    def __init__(self, session_factory=None):
        self.session_factory = session_factory

    def get_by_provider(self, provider_id: str) -> List[DomainService]:
        with session_scope(self.session_factory) as db:
            rows = (
                db.query(DbService)
                .filter_by(provider_id=provider_id)
                .order_by(DbService.sort_order)
                .all()
            )
            return [service_to_domain(row) for row in rows]

    def get_by_id(self, service_id: str) -> Optional[DomainService]:
        with session_scope(self.session_factory) as db:
            db_service = db.get(DbService, service_id)
            return service_to_domain(db_service) if db_service else None
