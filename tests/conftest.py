"""Shared pytest fixtures and configuration."""

import pytest

from app.core.config import Settings
from app.core.logging_config import get_logger


@pytest.fixture
def settings():
    """Create test settings instance with a gateway credential."""
    return Settings(_env_file=None, gateway_api_key="test-key")


@pytest.fixture
def settings_without_key():
    """Create test settings instance without a gateway credential."""
    return Settings(_env_file=None, gateway_api_key=None)


@pytest.fixture
def logger():
    """Create test logger instance."""
    return get_logger(__name__)


@pytest.fixture
def base64_run():
    """A 500-character base64-alphabet run, as embedded by some providers."""
    return ("iVBORw0KGgoAAAANSUhEUgAAAgAAAAIACAIAAAB7GkOt" * 12)[:500]
