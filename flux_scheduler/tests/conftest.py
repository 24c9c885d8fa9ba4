"""Shared pytest fixtures."""

import pytest

from flux_scheduler.core.config import Settings
from flux_scheduler.domain.scheduling.entities import Station

from .domain.scheduling.factories import make_always_open_station, make_station


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="local",
        LOG_FORMAT="console",
        STRETCH_MAX_ITERATIONS=500,
        DEFAULT_COMPACT_HORIZON_HOURS=8,
    )


@pytest.fixture
def workday_station() -> Station:
    """Station open 07:00-12:00 and 13:00-17:00, Monday to Friday."""
    return make_station("station-1")


@pytest.fixture
def always_open_station() -> Station:
    return make_always_open_station("station-1")
