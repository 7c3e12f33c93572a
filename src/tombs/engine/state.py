"""Mutable per-player game state.

Holds only dataclasses, enums and primitives (no open resources, no RNG,
no visibility oracle) so it can be pickled for persistence.
"""

from dataclasses import dataclass, field

from .entities import Entity
from .world import World


@dataclass
class GameState:
    """Everything one game needs between two player commands."""

    world: World
    player: Entity
    monsters: list[Entity] = field(default_factory=list)
    items: list[Entity] = field(default_factory=list)
    turns: int = 0
    is_finished: bool = False

    @property
    def messages(self):
        return self.world.messages

    @property
    def inventory(self) -> list[Entity]:
        return self.world.inventory

    def living_monsters(self) -> list[Entity]:
        return [m for m in self.monsters if m.alive and m.fighter is not None]

    def monster_at(self, x: int, y: int) -> Entity | None:
        """The living monster standing on a tile, if any."""
        for monster in self.monsters:
            if monster.fighter is not None and monster.pos == (x, y):
                return monster
        return None

    def is_blocked(self, x: int, y: int) -> bool:
        """True for walls and for tiles held by a blocking entity."""
        if self.world.grid.is_blocked(x, y):
            return True
        if self.player.blocks and self.player.pos == (x, y):
            return True
        return any(m.blocks and m.pos == (x, y) for m in self.monsters)
