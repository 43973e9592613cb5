"""
Interactive matvec driver.
Usage: matvec [--backend host|cuda] [--tile-edge G] [--workers K]
"""

import argparse
import sys

from matvec_lab import config
from matvec_lab.data import make_problem, parse_dimension
from matvec_lab.device.factory import get_device
from matvec_lab.errors import InvalidArgument, MatVecError
from matvec_lab.kernels.variants import KernelVariant
from matvec_lab.runner import run_matvec

MODE_PROMPT = "Enter 1 for Sequential calculation or enter 0 for Parallel calculation"
SIZE_PROMPT = "Enter in the maximum square to calculate"


def parse_mode(raw):
    """1 selects the sequential kernel, any other integer the parallel one."""
    try:
        mode = int(str(raw).strip())
    except ValueError:
        raise InvalidArgument(f"Mode must be an integer, got {raw!r}")
    return KernelVariant.SEQUENTIAL if mode == 1 else KernelVariant.PARALLEL


def format_results(c):
    return " | ".join(str(int(v)) for v in c)


def build_parser():
    parser = argparse.ArgumentParser(description="Dense integer matrix-vector product C = A @ B")
    parser.add_argument("--backend", choices=["host", "cuda"], default=None,
                        help="Execution boundary (default: MATVEC_BACKEND or 'host')")
    parser.add_argument("--tile-edge", type=int, default=None,
                        help="Tile edge length for the parallel kernel (default: MATVEC_TILE_EDGE or 20)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker threads for the host backend")
    return parser


def main(argv=None, stdin=None, stdout=None, stderr=None):
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    args = build_parser().parse_args(argv)

    try:
        print(MODE_PROMPT, file=stdout)
        variant = parse_mode(stdin.readline())
        print(SIZE_PROMPT, file=stdout)
        n = parse_dimension(stdin.readline())

        if variant is KernelVariant.SEQUENTIAL:
            print("Sequential calculation selected", file=stdout)
        else:
            print("Parallel calculation selected", file=stdout)

        backend = args.backend or config.backend()
        device_kwargs = {}
        if backend == "host" and args.workers is not None:
            device_kwargs["workers"] = args.workers

        problem = make_problem(n)
        device = get_device(backend, **device_kwargs) if n > 0 else None
        c = run_matvec(problem, variant, device=device, tile_edge=args.tile_edge)
    except MatVecError as exc:
        print(f"Error during {exc.phase}: {exc}", file=stderr)
        return 1

    print(format_results(c), file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
