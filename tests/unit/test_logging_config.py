"""Tests for logging configuration."""

import pytest

from app.core.config import Settings
from app.core.logging_config import get_logger, setup_logging, setup_logging_from_settings


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    setup_logging()


def test_log_file_from_settings(tmp_path):
    """Test LOG_FILE enables a file sink that receives bound context."""
    log_file = tmp_path / "logs" / "promo.log"
    settings = Settings(_env_file=None, log_file=log_file, log_level="DEBUG")

    setup_logging_from_settings(settings)
    get_logger(__name__, url="https://shop.example/x").info("Fetching page metadata")

    content = log_file.read_text(encoding="utf-8")
    assert "Fetching page metadata" in content
    assert "https://shop.example/x" in content


def test_level_override(tmp_path):
    """Test an explicit level overrides LOG_LEVEL."""
    log_file = tmp_path / "promo.log"
    settings = Settings(_env_file=None, log_file=log_file, log_level="DEBUG")

    setup_logging_from_settings(settings, log_level="WARNING")
    logger = get_logger(__name__)
    logger.info("hidden")
    logger.warning("shown")

    content = log_file.read_text(encoding="utf-8")
    assert "shown" in content
    assert "hidden" not in content


def test_no_file_sink_by_default(tmp_path, monkeypatch):
    """Test nothing is written to disk without LOG_FILE."""
    monkeypatch.chdir(tmp_path)

    setup_logging_from_settings(Settings(_env_file=None))
    get_logger(__name__).info("console only")

    assert list(tmp_path.iterdir()) == []
