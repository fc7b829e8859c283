from __future__ import annotations

import pytest

from pyfleet.config import FleetConfig
from pyfleet.state.store import FleetStore
from tests.factories import SteppingClock, sequential_ids


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def store(clock: SteppingClock) -> FleetStore:
    return FleetStore(FleetConfig(api_latency=0.0, monitoring_capacity=3), clock=clock, id_factory=sequential_ids())
