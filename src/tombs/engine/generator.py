"""Room-and-tunnel dungeon generator.

Rooms are placed at random and rejected when they overlap an earlier room;
each accepted room is joined to the previous one by an L-shaped tunnel. No
connectivity beyond that chain is attempted.
"""

import random
from dataclasses import dataclass

from ..logging import get_logger
from .tiles import TileGrid

logger = get_logger(__name__)


@dataclass(frozen=True)
class Room:
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Room":
        return cls(x, y, x + w, y + h)

    def center(self) -> tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: "Room") -> bool:
        """Closed-interval test: rooms sharing an edge count as overlapping."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> list[tuple[int, int]]:
        """Tiles carved to floor; the outer ring stays wall."""
        return [
            (x, y)
            for x in range(self.x1 + 1, self.x2)
            for y in range(self.y1 + 1, self.y2)
        ]


def carve_room(grid: TileGrid, room: Room) -> None:
    for x, y in room.interior():
        grid.carve(x, y)


def carve_h_tunnel(grid: TileGrid, x1: int, x2: int, y: int) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        grid.carve(x, y)


def carve_v_tunnel(grid: TileGrid, y1: int, y2: int, x: int) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        grid.carve(x, y)


def generate(
    width: int,
    height: int,
    max_rooms: int,
    room_min_size: int,
    room_max_size: int,
    rng: random.Random,
) -> tuple[TileGrid, list[Room]]:
    """Build a level and return it with the accepted rooms in order.

    The first room's center is the player's spawn point. Overlapping
    candidates are dropped, so fewer than ``max_rooms`` rooms (possibly
    none) may come back.
    """
    grid = TileGrid(width, height)
    rooms: list[Room] = []

    for _ in range(max_rooms):
        w = rng.randint(room_min_size, room_max_size)
        h = rng.randint(room_min_size, room_max_size)
        if w >= width or h >= height:
            continue
        x = rng.randint(0, width - w - 1)
        y = rng.randint(0, height - h - 1)
        new_room = Room.from_size(x, y, w, h)

        if any(new_room.intersects(other) for other in rooms):
            continue

        carve_room(grid, new_room)
        if rooms:
            new_x, new_y = new_room.center()
            prev_x, prev_y = rooms[-1].center()
            if rng.random() < 0.5:
                carve_h_tunnel(grid, prev_x, new_x, prev_y)
                carve_v_tunnel(grid, prev_y, new_y, new_x)
            else:
                carve_v_tunnel(grid, prev_y, new_y, prev_x)
                carve_h_tunnel(grid, prev_x, new_x, new_y)
        rooms.append(new_room)

    logger.debug(
        "level_generated",
        width=width,
        height=height,
        rooms=len(rooms),
        max_rooms=max_rooms,
    )
    return grid, rooms
