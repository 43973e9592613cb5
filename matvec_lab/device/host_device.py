"""
Host execution boundary backed by a thread pool.

Each tile of the launch grid becomes one job on a ThreadPoolExecutor, so
tiles run concurrently and interleave freely. C[x] is protected by striped
locks; fuzz_delay widens the window between the read and the write of
every accumulate to force interleavings.
"""

import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from matvec_lab import config
from matvec_lab.device.base import Device
from matvec_lab.errors import ExecutionFailure, InvalidArgument
from matvec_lab.kernels.matvec_host import HOST_KERNELS
from matvec_lab.planner import tile_coordinates


class HostBuffer:
    """Flat int64 buffer with an atomic add per element."""

    def __init__(self, count, dtype, fuzz_delay=0.0, stripes=64):
        self.data = np.zeros(count, dtype=dtype)
        self.fuzz_delay = fuzz_delay
        self._locks = [threading.Lock() for _ in range(max(1, min(stripes, count)))]

    def __len__(self):
        return self.data.shape[0]

    def __getitem__(self, index):
        return self.data[index]

    def atomic_add(self, index, value):
        with self._locks[index % len(self._locks)]:
            self._read_modify_write(index, value)

    def racy_add(self, index, value):
        self._read_modify_write(index, value)

    def _read_modify_write(self, index, value):
        current = self.data[index]
        if self.fuzz_delay:
            time.sleep(self.fuzz_delay)
        self.data[index] = current + value


class HostDevice(Device):
    """
    Thread-pool device.

    Args:
        workers: number of worker threads (config.host_workers() by default)
        fuzz_delay: seconds to sleep inside every read-modify-write of C
        shuffle_seed: if set, tiles are submitted in a seeded random order
        memory_limit: byte cap on live allocations, None for unlimited
    """

    name = "host"

    def __init__(self, workers=None, fuzz_delay=0.0, shuffle_seed=None, memory_limit=None,
                 max_threads_per_block=config.MAX_THREADS_PER_BLOCK):
        super().__init__(memory_limit=memory_limit, max_threads_per_block=max_threads_per_block)
        self.workers = workers if workers is not None else config.host_workers()
        if self.workers < 1:
            raise InvalidArgument(f"host: workers must be >= 1, got {self.workers}")
        self.fuzz_delay = fuzz_delay
        self.shuffle_seed = shuffle_seed

    def _raw_allocate(self, count):
        return HostBuffer(count, self.dtype, fuzz_delay=self.fuzz_delay)

    def _raw_copy_to_device(self, dst, src, count):
        dst.data[:count] = src[:count]

    def _raw_copy_to_host(self, dst, src, count):
        dst[:count] = src.data[:count]

    def _raw_launch(self, variant, grid, block, args):
        try:
            task = HOST_KERNELS[variant]
        except KeyError:
            raise ExecutionFailure(f"host: no kernel registered for {variant!r}")

        tiles = list(tile_coordinates(grid))
        if self.shuffle_seed is not None:
            random.Random(self.shuffle_seed).shuffle(tiles)

        def run_tile(bx, by):
            for tx in range(block[0]):
                x = bx * block[0] + tx
                for ty in range(block[1]):
                    task(x, by * block[1] + ty, *args)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(run_tile, bx, by) for bx, by in tiles]
            for future, tile in zip(futures, tiles):
                try:
                    future.result()
                except Exception as exc:
                    for pending in futures:
                        pending.cancel()
                    raise ExecutionFailure(f"host: {variant.value} kernel failed in tile {tile}: {exc}") from exc
