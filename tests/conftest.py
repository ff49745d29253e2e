# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator

import pytest

from butterfly_ids.core import layout
from butterfly_ids.core.settings import Settings
from butterfly_ids.services.issuer import Issuer, get_issuer

SEED_TIMESTAMP = 1_700_000_000_000
SEED_MACHINE = 8

_ENV_VARS = (
    "APP_NAME",
    "BUTTERFLY_MACHINE_ID",
    "BUTTERFLY_SEED_TIMESTAMP",
    "BUTTERFLY_BATCH_SIZE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host environment variables out of settings-driven tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_issuer.cache_clear()
    try:
        yield
    finally:
        get_issuer.cache_clear()


@pytest.fixture()
def issuer() -> Issuer:
    """Return an issuer with a fixed seed and a machine id that is a multiple of 8."""
    return Issuer.create_with_machine(SEED_TIMESTAMP, SEED_MACHINE)


@pytest.fixture()
def exhausted_issuer() -> Issuer:
    """Return an issuer whose composite counter is fully saturated."""
    saturated = Issuer.create(layout.TIMESTAMP_MAX)
    saturated._high_sequence = layout.HIGH_SEQUENCE_MAX
    saturated._low_sequence = layout.LOW_SEQUENCE_MAX
    return saturated


@pytest.fixture()
def test_settings() -> Settings:
    """Provide settings with a fixed seed so issued ids are reproducible."""
    return Settings(machine_id=SEED_MACHINE, seed_timestamp=SEED_TIMESTAMP)
