"""
Pytest fixtures for circadian light tests.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest
import structlog

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circadian_light.simulator import SimulatedSensor
from circadian_light.types import LightSample, UserProfile


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def white_sample():
    """Full-scale white light at 1000 lux, no timestamp."""
    return LightSample(r=255, g=255, b=255, lux=1000)


@pytest.fixture
def dark_sample():
    """All channels dark."""
    return LightSample(r=0, g=0, b=0, lux=0)


@pytest.fixture
def default_profile():
    """Intermediate chronotype, age 25, no conditions."""
    return UserProfile()


@pytest.fixture
def noon():
    """Local noon on the test day."""
    return datetime(2026, 1, 15, 12, 0)


@pytest.fixture
def quiet_sensor():
    """Simulated sensor without noise, so frames are exact."""
    return SimulatedSensor(scenario="office_day", noise=False, tz_name="UTC")


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() so later tests don't write to a closed capture stream."""
    yield
    structlog.reset_defaults()
