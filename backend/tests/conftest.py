"""
Central pytest configuration for the PetBKK tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests following SOLID principles.
"""

import os

# Test environment configuration (set early so import-time settings use it)
os.environ["PETBKK_SKIP_DOTENV"] = "1"
os.environ["PETBKK_STORAGE"] = "memory"
os.environ["DATABASE_URL"] = "sqlite://"  # In-memory SQLite for fast tests
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("PETBKK_STORE_PATH", None)
os.environ.pop("BOOKING_SLOT_CAPACITY", None)
os.environ.pop("ENFORCE_OPENING_HOURS", None)
os.environ.pop("TRUST_PROFILE_HEADER", None)

import pytest  # noqa: E402

from petbkk.container import ServiceContainer  # noqa: E402
from petbkk.main import create_app  # noqa: E402
from petbkk.repositories.factory import (  # noqa: E402
    create_memory_repositories,
    create_sql_repositories,
)
from tests.config import TestConfig, TickingClock  # noqa: E402

# Markers and shared fixtures
from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)
from tests.fixtures.domain_fixtures import *  # noqa: E402,F401,F403


@pytest.fixture
def fixed_clock():
    """Market clock frozen at TestConfig.FIXED_NOW."""
    return lambda: TestConfig.FIXED_NOW


@pytest.fixture
def store_clock():
    """Storage clock that advances one second per timestamp."""
    return TickingClock()


@pytest.fixture
def memory_repositories(store_clock):
    """Memory adapter seeded with the reference catalog."""
    return create_memory_repositories(clock=store_clock)


@pytest.fixture
def container(memory_repositories, fixed_clock):
    """Services wired to the memory adapter with default booking rules."""
    return ServiceContainer(
        memory_repositories,
        clock=fixed_clock,
        slot_capacity=0,
        enforce_opening_hours=False,
    )


@pytest.fixture
def profile(memory_repositories):
    """A signed-up profile in the memory store."""
    return memory_repositories.profiles.create(TestConfig.SAMPLE_PHONE)


@pytest.fixture
def other_profile(memory_repositories):
    return memory_repositories.profiles.create(TestConfig.OTHER_PHONE)


@pytest.fixture
def pet(memory_repositories, profile):
    """A dog owned by ``profile``."""
    return memory_repositories.pets.create(
        profile.id, {"name": "Mochi", "species": "dog"}
    )


@pytest.fixture
def sql_repositories(store_clock):
    """SQL adapter on a fresh in-memory SQLite database."""
    from petbkk.db.session import drop_tables, get_engine

    repositories = create_sql_repositories(TestConfig.DATABASE_URL, clock=store_clock)
    yield repositories
    drop_tables(get_engine(TestConfig.DATABASE_URL))


@pytest.fixture
def app(memory_repositories, fixed_clock):
    """Flask app backed by the memory adapter."""
    return create_app(
        TestConfig.get_flask_config(),
        repositories=memory_repositories,
        clock=fixed_clock,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in_client(client):
    """Test client with a session for TestConfig.SAMPLE_PHONE."""
    response = client.post("/api/auth/sign-in", json={"phone": "081-234-5678"})
    assert response.status_code == 200
    return client
