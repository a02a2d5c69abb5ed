import pytest


DH_ENV_KEYS = (
    "DH_SMALL_PRIME_MIN",
    "DH_SMALL_PRIME_MAX",
    "DH_LARGE_PRIME_MIN",
    "DH_LARGE_PRIME_MAX",
    "DH_SEED",
    "DH_MAX_ATTEMPTS",
)


class ScriptedRandom:
    """Stand-in random source that hands out queued values in order."""

    def __init__(self, ranges=(), ints=()):
        self.ranges = list(ranges)
        self.ints = list(ints)

    def randrange(self, lo, hi):
        return self.ranges.pop(0)

    def randint(self, a, b):
        value = self.ints.pop(0)
        assert a <= value <= b
        return value


@pytest.fixture(autouse=True)
def clean_dh_env(monkeypatch):
    # setenv first so anything a .env file adds is removed again afterwards
    for key in DH_ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture
def scripted_random():
    return ScriptedRandom
