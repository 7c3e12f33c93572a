"""Tile grid for a single dungeon level."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Tile:
    blocked: bool
    blocks_sight: bool


WALL = Tile(blocked=True, blocks_sight=True)
FLOOR = Tile(blocked=False, blocks_sight=False)


@dataclass
class TileGrid:
    """A fixed-size width x height array of tiles, indexed [x][y].

    A fresh grid is solid wall; the generator carves floor into it.
    """

    width: int
    height: int
    tiles: list[list[Tile]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.tiles:
            self.tiles = [[WALL] * self.height for _ in range(self.width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[x][y]

    def is_blocked(self, x: int, y: int) -> bool:
        """Out-of-bounds positions count as blocked."""
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocked

    def blocks_sight(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocks_sight

    def carve(self, x: int, y: int) -> None:
        self.tiles[x][y] = FLOOR

    def floor_count(self) -> int:
        return sum(1 for column in self.tiles for tile in column if tile == FLOOR)
