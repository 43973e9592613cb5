"""
Utility script to plot benchmark results from CSV files.
Usage: python matvec_lab/bench/plot_results.py
"""

import sys
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from pathlib import Path

# Add project root to path (two levels up from this file)
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

results_dir = Path(__file__).parent.parent.parent / "results"
plots_dir = results_dir / "plots"

KERNEL_MARKERS = {
    'baseline': 'o',
    'numba': 's',
    'sequential': 'v',
    'parallel': '^',
}


def speedup_table(df):
    """Sequential latency divided by parallel latency, per N."""
    seq = df[df['kernel'] == 'sequential'].set_index('N')['latency_ms']
    par = df[df['kernel'] == 'parallel'].set_index('N')['latency_ms']
    common = seq.index.intersection(par.index)
    return (seq.loc[common] / par.loc[common]).rename('speedup').reset_index()


def plot_matvec_results(csv_path=None, output_path=None):
    """Plot matvec benchmark results. Returns the saved path, or None."""
    csv_path = Path(csv_path) if csv_path is not None else results_dir / "matvec_results.csv"
    if not csv_path.exists():
        print(f"Results file not found: {csv_path}")
        return None

    df = pd.read_csv(csv_path)
    output_path = Path(output_path) if output_path is not None else plots_dir / "matvec_results.png"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    # Latency comparison
    for kernel, marker in KERNEL_MARKERS.items():
        data = df[df['kernel'] == kernel]
        if data.empty:
            continue
        axes[0].semilogy(data['N'], data['latency_ms'], '-', label=kernel, marker=marker)
    axes[0].set_xlabel('Matrix Dimension (N)')
    axes[0].set_ylabel('Latency (ms)')
    axes[0].set_title('Matvec Latency Comparison')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    # Parallel speedup over the sequential kernel
    speedup = speedup_table(df)
    axes[1].plot(speedup['N'], speedup['speedup'], '-', label='parallel / sequential', marker='^')
    axes[1].axhline(1.0, color='gray', linestyle='--', linewidth=1)
    axes[1].set_xlabel('Matrix Dimension (N)')
    axes[1].set_ylabel('Speedup (x)')
    axes[1].set_title('Parallel Kernel Speedup')
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    print(f"Saved plot: {output_path}")
    plt.close(fig)
    return output_path


if __name__ == "__main__":
    plots_dir.mkdir(parents=True, exist_ok=True)

    print("Generating plots from benchmark results...")
    plot_matvec_results()
    print("Plot generation complete!")
