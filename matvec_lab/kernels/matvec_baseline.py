"""
Baseline matrix-vector product using pure Python loops.
Sequential reference: one task, no concurrency, deterministic order.
"""

import numpy as np

from matvec_lab.data import make_problem


def matvec_baseline(a, b, n):
    """
    Compute C = A @ B with nested loops over a flat row-major A.

    The outer loop variable i is the output index: C[i] += A[i*n + j] * B[j].

    Args:
        a: numpy array of shape (n * n,), dtype int64
        b: numpy array of shape (n,), dtype int64
        n: matrix dimension

    Returns:
        c: numpy array of shape (n,), dtype int64
    """
    if a.shape[0] != n * n or b.shape[0] != n:
        raise ValueError(f"Dimension mismatch: len(a)={a.shape[0]}, len(b)={b.shape[0]}, n={n}")

    c = np.zeros(n, dtype=np.int64)

    for i in range(n):
        for j in range(n):
            c[i] += a[i * n + j] * b[j]

    return c


if __name__ == "__main__":
    problem = make_problem(3)

    print("Running baseline matvec...")
    c = matvec_baseline(problem.a, problem.b, problem.n)
    print(" | ".join(str(v) for v in c))
