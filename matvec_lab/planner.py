"""
Work-partition planner.
Splits the N x N task domain into a 2D grid of G x G tiles.
"""

from dataclasses import dataclass

from matvec_lab import config
from matvec_lab.errors import InvalidArgument


@dataclass(frozen=True)
class LaunchPlan:
    """Grid of tiles (blocks) and the shape of each tile."""

    n: int
    grid: tuple
    block: tuple

    @property
    def tile_count(self):
        return self.grid[0] * self.grid[1]

    @property
    def threads_per_block(self):
        return self.block[0] * self.block[1]

    @property
    def task_count(self):
        # Includes padding tasks in partially populated edge tiles
        return self.tile_count * self.threads_per_block

    def tiles(self):
        """Yield (block_x, block_y) for every tile in the grid."""
        return tile_coordinates(self.grid)


def tile_coordinates(grid):
    """Yield (block_x, block_y) for every tile of a (grid_x, grid_y) launch grid."""
    for bx in range(grid[0]):
        for by in range(grid[1]):
            yield bx, by


def _check_n(n):
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgument(f"Dimension must be an integer, got {n!r}")
    if n < 0:
        raise InvalidArgument(f"Dimension must be non-negative, got {n}")


def plan_parallel(n, tile_edge=None):
    """
    Plan the parallel kernel launch.

    Tile count along each axis is ceil(n / tile_edge). Tiles are never
    shrunk at the boundary; the kernel's in-bounds guard skips padding tasks.

    Args:
        n: matrix dimension, n >= 0
        tile_edge: tile edge length G (defaults to config.tile_edge())

    Returns:
        LaunchPlan with grid (0, 0) when n == 0
    """
    _check_n(n)
    if tile_edge is None:
        tile_edge = config.tile_edge()
    if isinstance(tile_edge, bool) or not isinstance(tile_edge, int) or tile_edge < 1:
        raise InvalidArgument(f"Tile edge must be a positive integer, got {tile_edge!r}")

    tiles_per_axis = (n + tile_edge - 1) // tile_edge
    return LaunchPlan(n=n, grid=(tiles_per_axis, tiles_per_axis), block=(tile_edge, tile_edge))


def plan_sequential(n):
    """One tile holding one task that walks the whole domain itself."""
    _check_n(n)
    if n == 0:
        return LaunchPlan(n=0, grid=(0, 0), block=(1, 1))
    return LaunchPlan(n=n, grid=(1, 1), block=(1, 1))
