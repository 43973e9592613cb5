"""
One-shot matvec run: plan, allocate, copy in, zero C, launch, copy out.
Each phase completes before the next starts.
"""

import numpy as np

from matvec_lab import planner
from matvec_lab.config import ELEMENT_DTYPE
from matvec_lab.device.factory import get_device
from matvec_lab.kernels.variants import KernelVariant


def plan_for(variant, n, tile_edge=None):
    if variant is KernelVariant.SEQUENTIAL:
        return planner.plan_sequential(n)
    return planner.plan_parallel(n, tile_edge)


def run_matvec(problem, variant=KernelVariant.PARALLEL, device=None, tile_edge=None):
    """
    Compute C = A @ B for `problem` with the chosen kernel variant.

    Args:
        problem: MatVecProblem holding n, A (flat, row-major) and B
        variant: KernelVariant to launch
        device: execution boundary; built from config when None
        tile_edge: tile edge length for parallel variants

    Returns:
        c: numpy array of shape (n,), dtype int64

    Raises:
        InvalidArgument, AllocationFailure, TransferFailure, ExecutionFailure
    """
    n = problem.n
    plan = plan_for(variant, n, tile_edge)
    c = np.zeros(n, dtype=ELEMENT_DTYPE)
    if plan.tile_count == 0:
        return c

    if device is None:
        device = get_device()

    itemsize = np.dtype(ELEMENT_DTYPE).itemsize
    matrix_bytes = n * n * itemsize
    vector_bytes = n * itemsize

    with device.session():
        d_a = device.allocate(matrix_bytes)
        d_b = device.allocate(vector_bytes)
        d_c = device.allocate(vector_bytes)

        device.copy_to_device(d_a, problem.a, matrix_bytes)
        device.copy_to_device(d_b, problem.b, vector_bytes)
        device.zero(d_c, vector_bytes)

        device.launch(variant, plan.grid, plan.block, d_a, d_b, d_c, n)

        device.copy_to_host(c, d_c, vector_bytes)

    return c


def run_parallel(problem, device=None, tile_edge=None):
    return run_matvec(problem, KernelVariant.PARALLEL, device=device, tile_edge=tile_edge)


def run_sequential(problem, device=None):
    return run_matvec(problem, KernelVariant.SEQUENTIAL, device=device)
