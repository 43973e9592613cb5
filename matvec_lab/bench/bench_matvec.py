"""
Benchmark script for matrix-vector kernels.
Compares the sequential reference kernel with the parallel atomic kernel
on one device, plus the pure Python and Numba host baselines.
"""

import sys
import os
import time
from pathlib import Path

# Set thread limits BEFORE importing NumPy so the reference product stays single-threaded
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"
os.environ["OPENBLAS_NUM_THREADS"] = "1"
os.environ["NUMEXPR_NUM_THREADS"] = "1"

import numpy as np
import pandas as pd

# Add project root to path (two levels up from this file)
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from matvec_lab.data import make_problem
from matvec_lab.device.factory import get_device
from matvec_lab.kernels.matvec_baseline import matvec_baseline
from matvec_lab.kernels.matvec_numba import matvec_numba
from matvec_lab.kernels.matvec_numpy import matvec_numpy
from matvec_lab.kernels.variants import KernelVariant
from matvec_lab.runner import run_matvec


def _summarize(kernel, backend, n, tile_edge, times):
    times = np.array(times)
    # Median is the primary metric (robust to outliers)
    median = np.median(times)
    ops = 2 * n * n
    return {
        'kernel': kernel,
        'backend': backend,
        'N': n,
        'tile_edge': tile_edge,
        'ops': ops,
        'latency_ms': median * 1000,
        'latency_p50_ms': np.percentile(times, 50) * 1000,
        'latency_p95_ms': np.percentile(times, 95) * 1000,
        'latency_p99_ms': np.percentile(times, 99) * 1000,
        'throughput_mops': (ops / 1e6) / median if median > 0 else float('nan'),
    }


def _time(fn, num_warmup, num_runs):
    for _ in range(num_warmup):
        fn()
    times = []
    result = None
    for _ in range(num_runs):
        t_start = time.perf_counter()
        result = fn()
        t_end = time.perf_counter()
        times.append(t_end - t_start)
    return times, result


def benchmark_matvec(sizes, device, tile_edge=20, num_warmup=1, num_runs=5, baseline_limit=128):
    """
    Benchmark matrix-vector kernels.

    Args:
        sizes: list of matrix dimensions N
        device: execution boundary the sequential and parallel kernels run on
        tile_edge: tile edge length G for the parallel kernel
        num_warmup: untimed runs before timing (JIT compilation)
        num_runs: timed runs per kernel
        baseline_limit: skip the pure Python baseline above this N

    Returns:
        DataFrame with benchmark results
    """
    results = []

    for n in sizes:
        print(f"\nBenchmarking matvec: N={n}, tile_edge={tile_edge}, backend={device.name}")
        problem = make_problem(n)
        c_ref = matvec_numpy(problem.a, problem.b, n)

        # 1. Baseline (pure Python)
        if n <= baseline_limit:
            print("  Testing baseline (pure Python)...")
            times, c = _time(lambda: matvec_baseline(problem.a, problem.b, n), 0, num_runs)
            assert np.array_equal(c, c_ref), "Baseline correctness check failed"
            results.append(_summarize('baseline', 'python', n, None, times))
        else:
            print("    Skipping baseline (problem too large)")

        # 2. Numba (host, sequential)
        print("  Testing Numba (JIT, sequential)...")
        times, c = _time(lambda: matvec_numba(problem.a, problem.b, n), num_warmup, num_runs)
        assert np.array_equal(c, c_ref), "Numba correctness check failed"
        results.append(_summarize('numba', 'host', n, None, times))

        # 3. Sequential kernel on the device (1x1 launch)
        print("  Testing sequential kernel...")
        times, c = _time(lambda: run_matvec(problem, KernelVariant.SEQUENTIAL, device=device),
                         num_warmup, num_runs)
        assert np.array_equal(c, c_ref), "Sequential kernel correctness check failed"
        results.append(_summarize('sequential', device.name, n, 1, times))

        # 4. Parallel atomic kernel on the device
        print("  Testing parallel kernel...")
        times, c = _time(lambda: run_matvec(problem, KernelVariant.PARALLEL, device=device, tile_edge=tile_edge),
                         num_warmup, num_runs)
        if not np.array_equal(c, c_ref):
            max_diff = np.max(np.abs(c - c_ref))
            raise AssertionError(f"Parallel kernel correctness check failed: max_diff={max_diff}")
        results.append(_summarize('parallel', device.name, n, tile_edge, times))

        seq_ms = results[-2]['latency_ms']
        par_ms = results[-1]['latency_ms']
        print(f"    sequential={seq_ms:.3f} ms, parallel={par_ms:.3f} ms, speedup={seq_ms / par_ms:.2f}x")

    return pd.DataFrame(results)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Benchmark matvec kernels')
    parser.add_argument('--backend', choices=['host', 'cuda'], default='host',
                        help='Device the sequential and parallel kernels run on')
    parser.add_argument('--tile-edge', type=int, default=20,
                        help='Tile edge length for the parallel kernel')
    parser.add_argument('--sizes', type=int, nargs='+', default=[20, 64, 128, 256],
                        help='Matrix dimensions to benchmark')
    parser.add_argument('--runs', type=int, default=5, help='Timed runs per kernel')
    args = parser.parse_args()

    print("=" * 70)
    print("Matvec Benchmark Suite")
    print("=" * 70)
    print(f"Backend: {args.backend}")
    print("  - sequential: single task walks the whole domain (1x1 launch)")
    print("  - parallel:   one task per (output, contraction) pair, atomic add")
    print("=" * 70)

    device = get_device(args.backend)
    df = benchmark_matvec(args.sizes, device, tile_edge=args.tile_edge, num_runs=args.runs)

    # Save results
    output_dir = Path(__file__).parent.parent.parent / "results"
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / "matvec_results.csv"
    df.to_csv(output_path, index=False)
    print(f"\nResults saved to: {output_path}")

    # Print summary
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(df.to_string(index=False))
