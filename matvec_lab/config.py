"""
Runtime configuration.
Defaults are module constants; each can be overridden by an environment variable.
"""

import os

import numpy as np

from matvec_lab.errors import InvalidArgument

# Element type for A, B and C on every device
ELEMENT_DTYPE = np.int64

# Tile edge length G used by the parallel planner
TILE_EDGE = 20

# Default execution boundary: "host" (thread pool) or "cuda" (numba.cuda)
BACKEND = "host"

# Worker threads for the host device
HOST_WORKERS = 8

# Threads-per-block limit, same as a CUDA device
MAX_THREADS_PER_BLOCK = 1024


def _env_int(name, default, minimum=0):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise InvalidArgument(f"{name} must be >= {minimum}, got {value}")
    return value


def tile_edge():
    return _env_int("MATVEC_TILE_EDGE", TILE_EDGE, minimum=1)


def host_workers():
    return _env_int("MATVEC_HOST_WORKERS", HOST_WORKERS, minimum=1)


def device_memory_limit():
    """Byte limit for device allocations, or None for unlimited."""
    limit = _env_int("MATVEC_DEVICE_MEMORY_LIMIT", 0)
    return limit or None


def backend():
    name = os.environ.get("MATVEC_BACKEND", BACKEND).strip().lower()
    if name not in ("host", "cuda"):
        raise InvalidArgument(f"MATVEC_BACKEND must be 'host' or 'cuda', got {name!r}")
    return name
