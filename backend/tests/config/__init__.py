"""
Test configuration package initialization.

Exports main configuration classes for easy import across the test suite.
"""

from .settings import CatalogIds, TestConfig, TickingClock

__all__ = [
    "CatalogIds",
    "TestConfig",
    "TickingClock",
]
