"""
numba.cuda execution boundary.
Runs on a real GPU, or on the Numba CUDA simulator when NUMBA_ENABLE_CUDASIM=1.
"""

from numba import cuda

from matvec_lab import config
from matvec_lab.device.base import Device
from matvec_lab.errors import AllocationFailure, ExecutionFailure, TransferFailure
from matvec_lab.kernels.matvec_cuda import CUDA_KERNELS


class CudaDevice(Device):
    name = "cuda"

    def __init__(self, memory_limit=None, max_threads_per_block=config.MAX_THREADS_PER_BLOCK):
        if not cuda.is_available():
            raise ExecutionFailure("cuda: no compatible CUDA device found")
        super().__init__(memory_limit=memory_limit, max_threads_per_block=max_threads_per_block)

    def _raw_allocate(self, count):
        try:
            return cuda.device_array(count, dtype=self.dtype)
        except Exception as exc:
            raise AllocationFailure(f"cuda: device allocation of {count} elements failed: {exc}") from exc

    def _raw_copy_to_device(self, dst, src, count):
        try:
            if count == dst.shape[0]:
                dst.copy_to_device(src[:count])
            else:
                staged = dst.copy_to_host()
                staged[:count] = src[:count]
                dst.copy_to_device(staged)
        except Exception as exc:
            raise TransferFailure(f"cuda: host to device copy failed: {exc}") from exc

    def _raw_copy_to_host(self, dst, src, count):
        try:
            staged = src.copy_to_host()
        except Exception as exc:
            raise TransferFailure(f"cuda: device to host copy failed: {exc}") from exc
        dst[:count] = staged[:count]

    def _raw_launch(self, variant, grid, block, args):
        try:
            kernel = CUDA_KERNELS[variant]
        except KeyError:
            raise ExecutionFailure(f"cuda: no kernel registered for {variant!r}")
        try:
            kernel[grid, block](*args)
            cuda.synchronize()
        except Exception as exc:
            raise ExecutionFailure(f"cuda: {variant.value} kernel failed: {exc}") from exc
