import numpy as np
import pytest

from matvec_lab.data import make_problem
from matvec_lab.device.factory import get_device
from matvec_lab.device.host_device import HostBuffer, HostDevice
from matvec_lab.errors import AllocationFailure, ExecutionFailure, InvalidArgument, TransferFailure
from matvec_lab.kernels.variants import KernelVariant
from matvec_lab.runner import run_parallel, run_sequential


def test_allocate_copy_roundtrip(host_device):
    src = np.array([5, 6, 7], dtype=np.int64)
    out = np.zeros(3, dtype=np.int64)
    with host_device.session():
        buf = host_device.allocate(24)
        host_device.copy_to_device(buf, src, 24)
        host_device.copy_to_host(out, buf, 24)
    assert out.tolist() == [5, 6, 7]


def test_zero_clears_buffer(host_device):
    out = np.full(4, 9, dtype=np.int64)
    with host_device.session():
        buf = host_device.allocate(32)
        host_device.copy_to_device(buf, np.arange(4), 32)
        host_device.zero(buf, 32)
        host_device.copy_to_host(out, buf, 32)
    assert out.tolist() == [0, 0, 0, 0]


def test_session_frees_buffers(host_device):
    with host_device.session():
        host_device.allocate(80)
        host_device.allocate(16)
        assert host_device.allocated_bytes == 96
    assert host_device.allocated_bytes == 0


def test_session_frees_buffers_on_failure(host_device):
    with pytest.raises(ExecutionFailure):
        with host_device.session():
            host_device.allocate(80)
            raise ExecutionFailure("boom")
    assert host_device.allocated_bytes == 0


@pytest.mark.parametrize("size_bytes", [0, -8, 12])
def test_bad_buffer_size_rejected(host_device, size_bytes):
    with pytest.raises(InvalidArgument):
        host_device.allocate(size_bytes)


def test_memory_limit_raises_allocation_failure():
    device = HostDevice(workers=2, memory_limit=100)
    problem = make_problem(10)  # A alone needs 800 bytes
    with pytest.raises(AllocationFailure) as excinfo:
        run_parallel(problem, device=device)
    assert excinfo.value.phase == "allocation"
    assert device.allocated_bytes == 0


def test_memory_limit_from_environment(monkeypatch):
    monkeypatch.setenv("MATVEC_DEVICE_MEMORY_LIMIT", "64")
    device = get_device("host")
    with pytest.raises(AllocationFailure):
        run_sequential(make_problem(4), device=device)


def test_oversize_copy_raises_transfer_failure(host_device):
    with host_device.session():
        buf = host_device.allocate(16)
        with pytest.raises(TransferFailure):
            host_device.copy_to_device(buf, np.arange(4), 32)
        with pytest.raises(TransferFailure):
            host_device.copy_to_host(np.zeros(1, dtype=np.int64), buf, 16)


def test_copy_to_unknown_buffer_raises_transfer_failure(host_device):
    stray = HostBuffer(2, np.int64)
    with pytest.raises(TransferFailure):
        host_device.copy_to_device(stray, np.arange(2), 16)


def test_block_over_thread_limit_raises_execution_failure(host_device):
    # 40 x 40 = 1600 threads per block, above the 1024 limit
    with pytest.raises(ExecutionFailure) as excinfo:
        run_parallel(make_problem(5), device=host_device, tile_edge=40)
    assert excinfo.value.phase == "execution"
    assert host_device.allocated_bytes == 0


def test_task_exception_raises_execution_failure(host_device):
    c = HostBuffer(2, np.int64)
    # A missing input matrix fails inside the task, not in the launch setup
    with pytest.raises(ExecutionFailure) as excinfo:
        host_device.launch(KernelVariant.PARALLEL, (1, 1), (2, 2), None, np.arange(2), c, 2)
    assert isinstance(excinfo.value.__cause__, TypeError)
    assert c.data.tolist() == [0, 0]


def test_empty_grid_launch_is_noop(host_device):
    host_device.launch(KernelVariant.PARALLEL, (0, 0), (20, 20), None, None, None, 0)


def test_host_buffer_atomic_add_is_exact_across_threads():
    from concurrent.futures import ThreadPoolExecutor

    buf = HostBuffer(1, np.int64, fuzz_delay=1e-5)

    def bump(_):
        for _ in range(20):
            buf.atomic_add(0, 1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(bump, range(8)))
    assert buf[0] == 160


def test_invalid_workers_rejected():
    with pytest.raises(InvalidArgument):
        HostDevice(workers=0)


def test_unknown_backend_rejected():
    with pytest.raises(InvalidArgument):
        get_device("tpu")


def test_backend_from_environment(monkeypatch):
    monkeypatch.setenv("MATVEC_BACKEND", "host")
    monkeypatch.setenv("MATVEC_HOST_WORKERS", "3")
    device = get_device()
    assert isinstance(device, HostDevice)
    assert device.workers == 3


def test_bad_backend_environment_rejected(monkeypatch):
    monkeypatch.setenv("MATVEC_BACKEND", "opencl")
    with pytest.raises(InvalidArgument):
        get_device()


def test_host_launch_runs_every_tile_once():
    device = HostDevice(workers=4, shuffle_seed=7)
    c = HostBuffer(3, np.int64)
    a = np.ones(9, dtype=np.int64)
    b = np.ones(3, dtype=np.int64)
    # 3 x 3 grid of 1 x 1 tiles: each (x, y) task runs exactly once
    device.launch(KernelVariant.PARALLEL, (3, 3), (1, 1), a, b, c, 3)
    assert c.data.tolist() == [3, 3, 3]
