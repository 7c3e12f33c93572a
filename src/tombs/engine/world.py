"""The world of one game: map, message log, inventory and depth.

The tile grid is rebuilt on every descent. The message log, the inventory
and the dungeon level counter live for the whole game.
"""

from dataclasses import dataclass, field
from typing import Iterator

from .colors import Color
from .entities import Entity
from .tiles import TileGrid


@dataclass
class MessageLog:
    """Append-only list of (text, color) pairs."""

    messages: list[tuple[str, Color]] = field(default_factory=list)

    def add(self, text: str, color: Color) -> None:
        self.messages.append((text, color))

    def tail(self, count: int) -> list[tuple[str, Color]]:
        if count <= 0:
            return []
        return self.messages[-count:]

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[tuple[str, Color]]:
        return iter(self.messages)


@dataclass
class World:
    grid: TileGrid
    messages: MessageLog = field(default_factory=MessageLog)
    inventory: list[Entity] = field(default_factory=list)
    dungeon_level: int = 1


@dataclass(frozen=True)
class Transition:
    """From ``level`` onward the scaled quantity takes ``value``."""

    level: int
    value: int


def from_dungeon_level(table: list[Transition], level: int) -> int:
    """Step-function lookup: value of the last entry reached, else 0."""
    for transition in reversed(table):
        if level >= transition.level:
            return transition.value
    return 0
