"""
Matrix-vector kernels for the host (thread pool) device.

Each function is one task. The host device computes (x, y) for every
thread of every tile the same way cuda.grid(2) does and calls the task
with it. C is a HostBuffer, which provides the atomic add.
"""

from matvec_lab.kernels.variants import KernelVariant


def matvec_atomic_task(x, y, a, b, c, n):
    """C[x] += A[x*n + y] * B[y] as one indivisible update."""
    if x < n and y < n:
        c.atomic_add(x, a[x * n + y] * b[y])


def matvec_racy_task(x, y, a, b, c, n):
    """Same as matvec_atomic_task but with a plain read-modify-write."""
    if x < n and y < n:
        c.racy_add(x, a[x * n + y] * b[y])


def matvec_sequential_task(x, y, a, b, c, n):
    """Single task: outer i is the output index, inner j the contraction index."""
    if x != 0 or y != 0:
        return
    for i in range(n):
        for j in range(n):
            c.racy_add(i, a[i * n + j] * b[j])


HOST_KERNELS = {
    KernelVariant.PARALLEL: matvec_atomic_task,
    KernelVariant.SEQUENTIAL: matvec_sequential_task,
    KernelVariant.RACY: matvec_racy_task,
}
