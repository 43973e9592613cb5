"""
Error taxonomy for matvec runs.
Every error carries the phase it happened in so the CLI can report it.
"""


class MatVecError(Exception):
    """Base class for all matvec failures."""

    phase = "run"


class InvalidArgument(MatVecError, ValueError):
    """Malformed user input or an impossible problem description."""

    phase = "input"


class AllocationFailure(MatVecError, MemoryError):
    """Device buffer could not be allocated."""

    phase = "allocation"


class TransferFailure(MatVecError, RuntimeError):
    """Copy between host and device memory failed."""

    phase = "transfer"


class ExecutionFailure(MatVecError, RuntimeError):
    """Kernel launch or execution failed on the device."""

    phase = "execution"
