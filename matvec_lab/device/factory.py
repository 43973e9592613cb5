"""Device selection by backend name."""

from matvec_lab import config
from matvec_lab.errors import InvalidArgument


def get_device(backend=None, **kwargs):
    """
    Build the execution boundary for `backend` ("host" or "cuda").

    The CUDA device is imported lazily so host runs never touch numba.cuda.
    """
    if backend is None:
        backend = config.backend()
    kwargs.setdefault("memory_limit", config.device_memory_limit())

    if backend == "host":
        from matvec_lab.device.host_device import HostDevice
        return HostDevice(**kwargs)
    if backend == "cuda":
        from matvec_lab.device.cuda_device import CudaDevice
        return CudaDevice(**kwargs)
    raise InvalidArgument(f"Unknown backend {backend!r}, expected 'host' or 'cuda'")
