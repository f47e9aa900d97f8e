"""
Centralized configuration module for application-wide settings.

Every setting is read from the environment (optionally populated from a
``.env`` file by the app factory) and cached at import time. Tests and
the app factory can call the getters directly to re-read the environment.
"""

import logging
import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from petbkk.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

TRUTHY_VALUES = ("true", "1", "yes")

STORAGE_MEMORY = "memory"
STORAGE_SQL = "sql"
STORAGE_BACKENDS = (STORAGE_MEMORY, STORAGE_SQL)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY_VALUES


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the market timezone used to decide what "today" means.

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Asia/Bangkok', 'UTC')
            Default: 'Asia/Bangkok'

    Invalid identifiers fall back to UTC with a warning.
    """
    tz_name = os.getenv("TZ", "Asia/Bangkok")

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


# Global timezone instance - initialized once at import time
APP_TZ = get_app_timezone()


def market_now() -> datetime:
    """Current time in the market timezone."""
    return datetime.now(APP_TZ)


def utc_now() -> datetime:
    """Timestamp source for created_at/updated_at."""
    return datetime.now(timezone.utc)


# ===========================
# Storage Configuration
# ===========================


def get_storage_backend() -> str:
    """
    Get which persistence adapter the process should use.

    Environment Variables:
        PETBKK_STORAGE: 'memory' (local mock store) or 'sql' (database)
            Default: 'memory'

    Raises:
        ValidationError: for any other value, so a typo fails at startup
        instead of silently choosing an adapter.
    """
    backend = os.getenv("PETBKK_STORAGE", STORAGE_MEMORY).strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValidationError(
            "PETBKK_STORAGE",
            f"Unknown storage backend '{backend}'. Expected one of {', '.join(STORAGE_BACKENDS)}",
        )
    return backend


def get_database_url() -> str:
    """SQLAlchemy URL used by the ``sql`` adapter."""
    return os.getenv("DATABASE_URL", "sqlite:///./petbkk.db")


def get_store_path() -> str | None:
    """
    Optional JSON file backing the memory store.

    Environment Variables:
        PETBKK_STORE_PATH: file path; unset keeps the store purely in memory
    """
    path = os.getenv("PETBKK_STORE_PATH", "").strip()
    return path or None


# ===========================
# Booking Configuration
# ===========================


def get_booking_slot_capacity() -> int:
    """
    Get the number of active bookings allowed per (provider, date, time).

    Environment Variables:
        BOOKING_SLOT_CAPACITY: non-negative integer
            Default: 0 (unlimited, no double-booking check)

    Invalid values fall back to 0 with a warning.
    """
    raw = os.getenv("BOOKING_SLOT_CAPACITY", "0").strip()
    try:
        capacity = int(raw)
    except ValueError:
        logger.warning(
            "Invalid BOOKING_SLOT_CAPACITY, falling back to unlimited",
            extra={"context": {"value": raw}},
        )
        return 0

    if capacity < 0:
        logger.warning(
            "Negative BOOKING_SLOT_CAPACITY, falling back to unlimited",
            extra={"context": {"value": raw}},
        )
        return 0
    return capacity


def get_enforce_opening_hours() -> bool:
    """
    Whether bookable slots are intersected with provider opening hours.

    Environment Variables:
        ENFORCE_OPENING_HOURS: truthy values "true", "1", "yes"
            Default: 'false' (static 09:00-18:00 grid for every provider)
    """
    return _env_flag("ENFORCE_OPENING_HOURS")


BOOKING_SLOT_CAPACITY = get_booking_slot_capacity()
ENFORCE_OPENING_HOURS = get_enforce_opening_hours()


# ===========================
# Application Configuration
# ===========================


def get_secret_key() -> str:
    return os.getenv("SECRET_KEY", "petbkk-dev-secret")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def get_log_json() -> bool:
    return _env_flag("LOG_JSON")


def get_log_to_file() -> bool:
    return _env_flag("LOG_TO_FILE")


def get_sql_echo() -> bool:
    """Log SQL statements with their timings (SQL_ECHO, default false)."""
    return _env_flag("SQL_ECHO")


def get_trust_profile_header() -> bool:
    """
    Whether requests may authenticate with a bare ``X-Profile-Id`` header.

    The header carries no credential, so it is only meant for deployments
    where a gateway in front of the API has already verified the caller
    and sets the header itself. Off unless TRUST_PROFILE_HEADER is truthy.
    """
    return _env_flag("TRUST_PROFILE_HEADER")


def log_booking_config():
    """
    Log the active booking configuration.

    Should be called during application startup to provide visibility
    into the slot and capacity rules in effect.
    """
    logger.info(
        "Booking configuration initialized",
        extra={
            "context": {
                "timezone": str(get_app_timezone()),
                "slot_capacity": get_booking_slot_capacity(),
                "enforce_opening_hours": get_enforce_opening_hours(),
            }
        },
    )


def log_storage_config():
    """Log the selected persistence adapter without exposing credentials."""
    backend = get_storage_backend()
    logger.info(
        "Storage configuration initialized",
        extra={
            "context": {
                "backend": backend,
                "store_path_set": bool(get_store_path()),
                "database_url_set": bool(os.getenv("DATABASE_URL")),
            }
        },
    )
