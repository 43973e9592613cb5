"""
Execution boundary shared by every device.

A device owns transient mirrors of host buffers. Buffers allocated inside
a session() are freed when the session exits, even if the run failed.
"""

from contextlib import contextmanager

import numpy as np

from matvec_lab import config
from matvec_lab.errors import AllocationFailure, ExecutionFailure, InvalidArgument, TransferFailure


class Device:
    """
    Base class for the allocate / copy / zero / launch contract.

    Subclasses implement the _raw_* hooks; this class validates sizes,
    enforces the optional memory limit and tracks live buffers.
    """

    name = "device"

    def __init__(self, memory_limit=None, max_threads_per_block=config.MAX_THREADS_PER_BLOCK):
        self.dtype = np.dtype(config.ELEMENT_DTYPE)
        self.memory_limit = memory_limit
        self.max_threads_per_block = max_threads_per_block
        self.allocated_bytes = 0
        self._live = {}
        self._sessions = []

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def allocate(self, size_bytes):
        count = self._element_count(size_bytes)
        if self.memory_limit is not None and self.allocated_bytes + size_bytes > self.memory_limit:
            raise AllocationFailure(
                f"{self.name}: cannot allocate {size_bytes} bytes, "
                f"{self.allocated_bytes} of {self.memory_limit} already in use"
            )
        try:
            buf = self._raw_allocate(count)
        except MemoryError as exc:
            raise AllocationFailure(f"{self.name}: cannot allocate {size_bytes} bytes") from exc

        self._live[id(buf)] = (buf, size_bytes)
        self.allocated_bytes += size_bytes
        if self._sessions:
            self._sessions[-1].append(buf)
        return buf

    def free(self, buf):
        entry = self._live.pop(id(buf), None)
        if entry is None:
            return
        self.allocated_bytes -= entry[1]
        self._raw_free(buf)

    def copy_to_device(self, dst, src, size_bytes):
        count = self._transfer_count(dst, size_bytes)
        if count > np.size(src):
            raise TransferFailure(f"{self.name}: source holds {np.size(src)} elements, {count} requested")
        self._raw_copy_to_device(dst, np.ascontiguousarray(src, dtype=self.dtype), count)

    def copy_to_host(self, dst, src, size_bytes):
        count = self._transfer_count(src, size_bytes)
        if count > np.size(dst):
            raise TransferFailure(f"{self.name}: destination holds {np.size(dst)} elements, {count} requested")
        self._raw_copy_to_host(dst, src, count)

    def zero(self, dst, size_bytes):
        count = self._transfer_count(dst, size_bytes)
        self._raw_copy_to_device(dst, np.zeros(count, dtype=self.dtype), count)

    def launch(self, variant, grid, block, *args):
        """Run `variant` over grid x block and wait for it to finish."""
        threads = block[0] * block[1]
        if threads < 1:
            raise ExecutionFailure(f"{self.name}: empty block shape {block}")
        if threads > self.max_threads_per_block:
            raise ExecutionFailure(
                f"{self.name}: block {block} needs {threads} threads, "
                f"limit is {self.max_threads_per_block}"
            )
        if grid[0] * grid[1] == 0:
            return
        self._raw_launch(variant, grid, block, args)

    @contextmanager
    def session(self):
        """Free every buffer allocated inside the with block on exit."""
        owned = []
        self._sessions.append(owned)
        try:
            yield self
        finally:
            self._sessions.pop()
            for buf in reversed(owned):
                self.free(buf)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _element_count(self, size_bytes):
        if size_bytes <= 0 or size_bytes % self.dtype.itemsize:
            raise InvalidArgument(
                f"{self.name}: buffer size must be a positive multiple of "
                f"{self.dtype.itemsize} bytes, got {size_bytes}"
            )
        return size_bytes // self.dtype.itemsize

    def _transfer_count(self, buf, size_bytes):
        if id(buf) not in self._live:
            raise TransferFailure(f"{self.name}: buffer is not allocated on this device")
        count = self._element_count(size_bytes)
        capacity = self._live[id(buf)][1] // self.dtype.itemsize
        if count > capacity:
            raise TransferFailure(f"{self.name}: {count} elements requested, buffer holds {capacity}")
        return count

    def _raw_allocate(self, count):
        raise NotImplementedError

    def _raw_free(self, buf):
        pass

    def _raw_copy_to_device(self, dst, src, count):
        raise NotImplementedError

    def _raw_copy_to_host(self, dst, src, count):
        raise NotImplementedError

    def _raw_launch(self, variant, grid, block, args):
        raise NotImplementedError
