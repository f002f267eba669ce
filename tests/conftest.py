"""Root conftest - shared fixtures.

Invariants:
    - Every test gets a fresh in-memory storage
    - Timestamps come from a counter clock so ordering is deterministic
    - Settings never read a developer's .env file
"""

import pytest

from cryptoex.auth.hashing import PasswordHasher
from cryptoex.auth.service import AuthService
from cryptoex.settings import Settings
from cryptoex.storage.adapter import MemoryStorage


class CounterClock:
    """Millisecond clock that advances by one on every read."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock():
    return CounterClock()


@pytest.fixture
def settings():
    return Settings(_env_file=None, site_url=None)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def hasher():
    return PasswordHasher()


@pytest.fixture
def service(storage, settings, hasher, clock):
    return AuthService(storage, settings=settings, hasher=hasher, clock=clock)
