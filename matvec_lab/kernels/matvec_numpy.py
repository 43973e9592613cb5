"""
NumPy matrix-vector product.
Used as the oracle the kernels are checked against.
"""

import numpy as np


def matvec_numpy(a, b, n):
    """
    Compute C = A @ B using NumPy.

    Args:
        a: numpy array of shape (n * n,), row-major
        b: numpy array of shape (n,)
        n: matrix dimension

    Returns:
        c: numpy array of shape (n,), dtype int64
    """
    return a.reshape(n, n).astype(np.int64) @ b.astype(np.int64)


def verify_correctness(a, b, n, c_result):
    """Integer results must match the NumPy product exactly."""
    c_ref = matvec_numpy(a, b, n)
    return c_result.shape == c_ref.shape and np.array_equal(c_result, c_ref)
