"""Shared test fixtures for hcp-fleet tests."""

from datetime import datetime

import pytest

from hcp_fleet.clock import FakeClock
from tests.builders import LATER, NOW


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def later() -> datetime:
    return LATER


@pytest.fixture
def clock() -> FakeClock:
    """A clock pinned to NOW."""
    return FakeClock(NOW)
