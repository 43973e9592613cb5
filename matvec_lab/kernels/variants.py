"""Kernel variants understood by every device."""

from enum import Enum


class KernelVariant(Enum):
    # One task per (output, contraction) pair, atomic add into C[x]
    PARALLEL = "parallel"
    # One task walking the whole domain
    SEQUENTIAL = "sequential"
    # PARALLEL without the atomic add; races on C[x]
    RACY = "racy"
