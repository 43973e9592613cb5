import os

# Must be set before numba is imported anywhere in the session
os.environ.setdefault("NUMBA_ENABLE_CUDASIM", "1")

import pytest

from matvec_lab.device.host_device import HostDevice


@pytest.fixture
def host_device():
    return HostDevice(workers=8)


@pytest.fixture
def fuzzing_device():
    """Host device that sleeps inside every accumulate to force interleavings."""
    return HostDevice(workers=8, fuzz_delay=1e-4, shuffle_seed=1234)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MATVEC_BACKEND", "MATVEC_TILE_EDGE", "MATVEC_HOST_WORKERS", "MATVEC_DEVICE_MEMORY_LIMIT"):
        monkeypatch.delenv(name, raising=False)
