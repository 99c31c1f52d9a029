"""Shared fixtures for kinesim tests."""
import copy
import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pytest

from kinesim import logging as sim_logging
from kinesim.surface import PygameSurface, RecordingSurface


class FakeClock:
    """Deterministic wall clock; sleeping advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recording_surface():
    return RecordingSurface(800, 600)


@pytest.fixture
def pixel_surface():
    """Off-screen pygame surface, 200x100 pixels, white background."""
    return PygameSurface.headless(200, 100)


@pytest.fixture(autouse=True)
def restore_logging_config():
    """Keep logging configuration and sinks from leaking between tests."""
    saved = copy.deepcopy(sim_logging._config)
    saved_sinks = dict(sim_logging._sinks)
    saved_default = sim_logging._default_sink
    yield
    sim_logging._config.clear()
    sim_logging._config.update(saved)
    sim_logging._sinks.clear()
    sim_logging._sinks.update(saved_sinks)
    sim_logging.set_default_sink(saved_default)
