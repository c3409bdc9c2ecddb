import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from rps_engine import RoundEngine
from rps_settings import get_settings


class ScriptedRandom:
    """Stands in for random.Random and hands out the queued computer choices."""

    def __init__(self, *choices):
        self.queue = list(choices)

    def push(self, *choices):
        self.queue.extend(choices)

    def choice(self, seq):
        picked = self.queue.pop(0)
        assert picked in seq
        return picked


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def engine(rng):
    return RoundEngine(rng=rng)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
