"""
Persistence adapter selection.

Exactly one adapter is active per process; it is chosen once at startup
from ``PETBKK_STORAGE`` and never switched on the fly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from petbkk.core.config import (
    STORAGE_SQL,
    get_database_url,
    get_storage_backend,
    get_store_path,
    utc_now,
)
from petbkk.core.logging_config import get_logger
from petbkk.domain.interfaces import (
    IBookingRepository,
    IPetRepository,
    IProfileRepository,
    IProviderReader,
    IServiceReader,
)

logger = get_logger(__name__)


@dataclass
class RepositoryBundle:
    """The five repositories the services depend on."""

    profiles: IProfileRepository
    pets: IPetRepository
    bookings: IBookingRepository
    providers: IProviderReader
    services: IServiceReader
    backend: str


def create_memory_repositories(
    path: Optional[str] = None, clock: Callable[[], datetime] = utc_now
) -> RepositoryBundle:
    from petbkk.repositories.memory_store import (
        MemoryBookingRepository,
        MemoryPetRepository,
        MemoryProfileRepository,
        MemoryProviderRepository,
        MemoryServiceRepository,
        MemoryStore,
    )

    store = MemoryStore(path=path, clock=clock)
    return RepositoryBundle(
        profiles=MemoryProfileRepository(store),
        pets=MemoryPetRepository(store),
        bookings=MemoryBookingRepository(store),
        providers=MemoryProviderRepository(store),
        services=MemoryServiceRepository(store),
        backend="memory",
    )


def create_sql_repositories(
    database_url: Optional[str] = None,
    clock: Callable[[], datetime] = utc_now,
    seed: bool = True,
) -> RepositoryBundle:
    """SQL adapter: creates missing tables and seeds the catalog."""
    from petbkk.db.seed import seed_catalog
    from petbkk.db.session import create_tables, get_engine, get_sessionmaker
    from petbkk.repositories.booking_repo import BookingRepository
    from petbkk.repositories.catalog_repo import ProviderRepository, ServiceRepository
    from petbkk.repositories.pet_repo import PetRepository
    from petbkk.repositories.profile_repo import ProfileRepository

    database_url = database_url or get_database_url()
    create_tables(get_engine(database_url))
    session_factory = get_sessionmaker(database_url)
    if seed:
        seed_catalog(session_factory)

    return RepositoryBundle(
        profiles=ProfileRepository(session_factory, clock=clock),
        pets=PetRepository(session_factory, clock=clock),
        bookings=BookingRepository(session_factory, clock=clock),
        providers=ProviderRepository(session_factory),
        services=ServiceRepository(session_factory),
        backend="sql",
    )


def create_repositories(backend: Optional[str] = None) -> RepositoryBundle:
    """Build the repository bundle for the configured storage backend."""
    backend = backend or get_storage_backend()
    if backend == STORAGE_SQL:
        bundle = create_sql_repositories()
    else:
        bundle = create_memory_repositories(path=get_store_path())

    logger.info("Repositories initialized", extra={"context": {"backend": backend}})
    return bundle
