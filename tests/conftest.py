"""
Shared test fixtures and configuration.

Unit tests run without external services. Integration tests under
tests/integration/ need PostgreSQL and are skipped when it is unreachable.
"""

from collections.abc import Generator

import pytest

from softwarehub.config.settings import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment changes in a test stay local to it."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
