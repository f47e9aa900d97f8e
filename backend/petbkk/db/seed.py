"""
Database seeding and initialization functions.

Ensures the read-only provider/service catalog exists in the database.
Seeding is idempotent: rows that already exist are left untouched.
"""

from typing import List, Optional

from petbkk.core.logging_config import get_logger
from petbkk.data.catalog import build_catalog
from petbkk.db.base import Provider, Service
from petbkk.db.session import session_scope
from petbkk.domain import entities

logger = get_logger(__name__)


def _provider_row(provider: entities.Provider) -> Provider:
    return Provider(
        id=provider.id,
        business_name=provider.business_name,
        business_type=provider.business_type,
        description=provider.description,
        address=provider.address,
        district=provider.district,
        province=provider.province,
        phone=provider.phone,
        email=provider.email,
        website=provider.website,
        logo_url=provider.logo_url,
        rating=provider.rating,
        review_count=provider.review_count,
        opening_hours={
            day: hours.to_dict() if hours else None
            for day, hours in provider.opening_hours.items()
        },
        is_verified=provider.is_verified,
        created_at=provider.created_at,
    )


def _service_row(service: entities.Service, sort_order: int) -> Service:
    return Service(
        id=service.id,
        provider_id=service.provider_id,
        name=service.name,
        description=service.description,
        duration_minutes=service.duration_minutes,
        price_min=service.price_min,
        price_max=service.price_max,
        pet_types=list(service.pet_types),
        is_available=service.is_available,
        sort_order=sort_order,
        created_at=service.created_at,
    )


def seed_catalog(
    session_factory=None, catalog: Optional[List[entities.Provider]] = None
) -> int:
    """
    Insert catalog providers and services that are not yet in the database.

    Returns:
        Number of providers inserted.
    """
    inserted = 0
    with session_scope(session_factory) as db:
        for provider in catalog if catalog is not None else build_catalog():
            if db.get(Provider, provider.id) is not None:
                continue
            db.add(_provider_row(provider))
            for index, service in enumerate(provider.services):
                db.add(_service_row(service, index))
            inserted += 1

    logger.info(
        "Catalog seeded",
        extra={"context": {"providers_inserted": inserted}},
    )
    return inserted
