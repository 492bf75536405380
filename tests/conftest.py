"""Shared fixtures for the pre-fill test suite."""

import pytest

from formprefill.core.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    """Drop the cached Settings so env overrides in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings()
