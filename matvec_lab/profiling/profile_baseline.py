"""
Profiling script for matvec kernels.
Uses cProfile to show where the pure Python baseline and the host
parallel kernel spend their time.
"""

import sys
import cProfile
import pstats
from pathlib import Path

# Add project root to path (two levels up from this file)
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from matvec_lab.data import make_problem
from matvec_lab.device.host_device import HostDevice
from matvec_lab.kernels.matvec_baseline import matvec_baseline
from matvec_lab.runner import run_parallel


def profile_baseline(n=128, limit=10):
    """Profile the sequential pure Python baseline."""
    print("Profiling baseline matvec...")
    problem = make_problem(n)

    profiler = cProfile.Profile()
    profiler.enable()
    matvec_baseline(problem.a, problem.b, problem.n)
    profiler.disable()

    stats = pstats.Stats(profiler)
    stats.sort_stats('cumulative')
    print(f"\nTop {limit} functions by cumulative time:")
    stats.print_stats(limit)

    return stats


def profile_host_parallel(n=64, tile_edge=16, limit=10):
    """Profile the parallel kernel on the host device (launching thread only)."""
    print("\nProfiling host parallel matvec...")
    problem = make_problem(n)
    device = HostDevice()

    profiler = cProfile.Profile()
    profiler.enable()
    run_parallel(problem, device=device, tile_edge=tile_edge)
    profiler.disable()

    stats = pstats.Stats(profiler)
    stats.sort_stats('cumulative')
    print(f"\nTop {limit} functions by cumulative time:")
    stats.print_stats(limit)

    return stats


if __name__ == "__main__":
    print("=" * 60)
    print("Matvec Kernel Profiling")
    print("=" * 60)

    profile_baseline()
    profile_host_parallel()

    print("\n" + "=" * 60)
    print("Profiling complete!")
    print("=" * 60)
