"""Pytest configuration and fixtures."""

import os

import pytest

# Set before any test module builds Settings
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("CLARITY_ENV", "test")


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings and clients so env patches take effect per test."""
    from clarity.api.dependencies import get_ask_orchestrator
    from clarity.core.config import get_settings

    get_settings.cache_clear()
    get_ask_orchestrator.cache_clear()
    yield
    get_settings.cache_clear()
    get_ask_orchestrator.cache_clear()
