"""
Numba JIT sequential matrix-vector product.
Same loop order as the pure Python baseline, compiled to native code.
Used as the fast oracle in benchmarks.
"""

import numpy as np
from numba import njit

from matvec_lab.data import make_problem


@njit(cache=True)
def matvec_numba(a, b, n):
    """
    Compute C = A @ B sequentially with the reference index convention.

    Args:
        a: numpy array of shape (n * n,), dtype int64, contiguous
        b: numpy array of shape (n,), dtype int64
        n: matrix dimension

    Returns:
        c: numpy array of shape (n,), dtype int64
    """
    c = np.zeros(n, dtype=np.int64)

    for i in range(n):
        acc = 0
        for j in range(n):
            acc += a[i * n + j] * b[j]
        c[i] = acc

    return c


if __name__ == "__main__":
    problem = make_problem(3)

    print("Running Numba matvec...")
    # Warmup
    _ = matvec_numba(problem.a, problem.b, problem.n)

    c = matvec_numba(problem.a, problem.b, problem.n)
    print(" | ".join(str(v) for v in c))
