from __future__ import annotations

import pytest
from fakes import FakeBackend, FakeClock

from pysecurehome.config import SecureHomeConfig


@pytest.fixture
def config() -> SecureHomeConfig:
    return SecureHomeConfig(
        username="user@example.com",
        password="secret",
        cache_ttl=5,
        keypad_pin="1234",
        recovery_backoff_base=0.01,
        recovery_backoff_cap=0.04,
        recovery_max_attempts=3,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
