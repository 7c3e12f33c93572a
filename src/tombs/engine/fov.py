"""Visibility oracle.

The engine only asks two things of field of view: recompute from an origin,
and whether a tile is currently visible. ``FieldOfView`` answers them with
Bresenham line of sight inside a circular radius.
"""

from typing import Iterator, Protocol

from .tiles import TileGrid


class VisibilityOracle(Protocol):
    def recompute_from(self, x: int, y: int, radius: int) -> None: ...

    def is_visible(self, x: int, y: int) -> bool: ...


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    dx, dy = abs(x1 - x0), abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    x, y = x0, y0
    while True:
        yield x, y
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


class FieldOfView:
    """Line-of-sight FOV over a tile grid. Walls are lit but stop the ray."""

    def __init__(self, grid: TileGrid):
        self.grid = grid
        self.visible: set[tuple[int, int]] = set()

    def _line_clear(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        for x, y in bresenham_line(x0, y0, x1, y1):
            if (x, y) in ((x0, y0), (x1, y1)):
                continue
            if self.grid.blocks_sight(x, y):
                return False
        return True

    def recompute_from(self, x: int, y: int, radius: int) -> None:
        visible = set()
        for ty in range(max(0, y - radius), min(self.grid.height, y + radius + 1)):
            for tx in range(max(0, x - radius), min(self.grid.width, x + radius + 1)):
                if (tx - x) ** 2 + (ty - y) ** 2 > radius**2:
                    continue
                if self._line_clear(x, y, tx, ty):
                    visible.add((tx, ty))
        self.visible = visible

    def is_visible(self, x: int, y: int) -> bool:
        return (x, y) in self.visible
