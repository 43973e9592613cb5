"""
numba.cuda matrix-vector kernels.

Launch the parallel kernels over a 2D grid from planner.plan_parallel and
the sequential kernel over the 1x1 grid from planner.plan_sequential.
Set NUMBA_ENABLE_CUDASIM=1 to run them on the Numba CUDA simulator.
"""

from numba import cuda

from matvec_lab.kernels.variants import KernelVariant


@cuda.jit
def matvec_atomic_kernel(a, b, c, n):
    """
    One thread per (x, y): x is the output index, y the contraction index.

    Threads in the padding region of an edge tile do nothing. Many threads
    share the same x, so the update of c[x] must be atomic.
    """
    x, y = cuda.grid(2)
    if x < n and y < n:
        cuda.atomic.add(c, x, a[x * n + y] * b[y])


@cuda.jit
def matvec_racy_kernel(a, b, c, n):
    """Non-atomic update of c[x]; loses contributions under contention."""
    x, y = cuda.grid(2)
    if x < n and y < n:
        c[x] = c[x] + a[x * n + y] * b[y]


@cuda.jit
def matvec_sequential_kernel(a, b, c, n):
    """Single thread walks the whole domain: c[i] += a[i*n + j] * b[j]."""
    x, y = cuda.grid(2)
    if x != 0 or y != 0:
        return
    for i in range(n):
        for j in range(n):
            c[i] += a[i * n + j] * b[j]


CUDA_KERNELS = {
    KernelVariant.PARALLEL: matvec_atomic_kernel,
    KernelVariant.SEQUENTIAL: matvec_sequential_kernel,
    KernelVariant.RACY: matvec_racy_kernel,
}
