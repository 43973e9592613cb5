"""
Deterministic input construction for C = A @ B.
A is stored flat in row-major order: A[i][j] lives at a[i * n + j].
"""

from dataclasses import dataclass

import numpy as np

from matvec_lab.config import ELEMENT_DTYPE
from matvec_lab.errors import AllocationFailure, InvalidArgument


def column_seed(i, j):
    """Reference construction: every row holds 1..n."""
    return j + 1


@dataclass(frozen=True)
class MatVecProblem:
    """Host-owned, read-only inputs of one run."""

    n: int
    a: np.ndarray
    b: np.ndarray

    def __post_init__(self):
        if self.a.shape != (self.n * self.n,):
            raise InvalidArgument(f"A must hold {self.n * self.n} elements, got shape {self.a.shape}")
        if self.b.shape != (self.n,):
            raise InvalidArgument(f"B must hold {self.n} elements, got shape {self.b.shape}")
        self.a.setflags(write=False)
        self.b.setflags(write=False)

    @property
    def matrix(self):
        """A as an (n, n) view."""
        return self.a.reshape(self.n, self.n)

    def empty_result(self):
        return np.zeros(self.n, dtype=ELEMENT_DTYPE)


def parse_dimension(raw):
    """Parse user-supplied N, rejecting non-numeric and negative values."""
    try:
        n = int(str(raw).strip())
    except ValueError:
        raise InvalidArgument(f"Matrix size must be a whole number, got {raw!r}")
    if n < 0:
        raise InvalidArgument(f"Matrix size must be non-negative, got {n}")
    return n


def make_problem(n, generator=column_seed):
    """
    Build A (n x n) and B (n) deterministically.

    Args:
        n: dimension, n >= 0
        generator: callable (i, j) -> int giving A[i][j]

    Returns:
        MatVecProblem with B[j] = j + 1
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidArgument(f"Matrix size must be a non-negative integer, got {n!r}")

    try:
        a = np.empty(n * n, dtype=ELEMENT_DTYPE)
        b = np.arange(1, n + 1, dtype=ELEMENT_DTYPE)
    except MemoryError as exc:
        raise AllocationFailure(f"Cannot allocate A and B for n={n}: {exc}") from exc

    if generator is column_seed:
        # Every row of A is B
        a.reshape(n, n)[:] = b
    else:
        for i in range(n):
            for j in range(n):
                a[i * n + j] = generator(i, j)
    return MatVecProblem(n=n, a=a, b=b)
