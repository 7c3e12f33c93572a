"""Level population, new games and descent.

Spawn weights are transition tables evaluated at the current dungeon level,
so deeper levels can introduce new kinds without changing the tables of
earlier ones.
"""

import random

from ..logging import get_logger
from . import colors
from .combat import heal
from .entities import Entity, create_item, create_monster, create_player, create_stairs
from .generator import Room, generate
from .state import GameState
from .tiles import TileGrid
from .tuning import Tuning
from .world import Transition, World, from_dungeon_level

logger = get_logger(__name__)

MONSTER_CHANCES: dict[str, list[Transition]] = {
    "orc": [Transition(1, 80)],
    "troll": [Transition(1, 20)],
}

ITEM_CHANCES: dict[str, list[Transition]] = {
    "heal": [Transition(1, 70)],
    "lightning": [Transition(1, 10)],
    "fireball": [Transition(1, 10)],
    "confuse": [Transition(1, 10)],
    "sword": [Transition(4, 5)],
    "helmet": [Transition(6, 10)],
    "shield": [Transition(8, 15)],
}

WELCOME = "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings."


def random_choice(table: list[tuple[str, int]], rng: random.Random) -> str:
    """Weighted pick; zero weights are never chosen, ties go by table order."""
    total = sum(weight for _, weight in table if weight > 0)
    if total <= 0:
        raise ValueError("random_choice needs at least one positive weight")
    roll = rng.randint(1, total)
    running = 0
    for name, weight in table:
        if weight <= 0:
            continue
        running += weight
        if roll <= running:
            return name
    raise AssertionError("unreachable")


def _chances(table: dict[str, list[Transition]], level: int) -> list[tuple[str, int]]:
    return [(name, from_dungeon_level(steps, level)) for name, steps in table.items()]


def _occupied(x: int, y: int, grid: TileGrid, placed: list[Entity]) -> bool:
    if grid.is_blocked(x, y):
        return True
    return any(obj.blocks and obj.pos == (x, y) for obj in placed)


def populate_level(
    grid: TileGrid,
    rooms: list[Room],
    rng: random.Random,
    tuning: Tuning,
    dungeon_level: int = 1,
) -> tuple[list[Entity], list[Entity], tuple[int, int] | None]:
    """Place monsters, items and the stairs in freshly generated rooms."""
    monsters: list[Entity] = []
    items: list[Entity] = []
    monster_table = _chances(MONSTER_CHANCES, dungeon_level)
    item_table = _chances(ITEM_CHANCES, dungeon_level)
    # the player arrives at the first room's center
    spawn = rooms[0].center() if rooms else None

    for room in rooms:
        for _ in range(rng.randint(0, tuning.max_room_monsters)):
            x = rng.randint(room.x1 + 1, room.x2 - 1)
            y = rng.randint(room.y1 + 1, room.y2 - 1)
            if (x, y) == spawn or _occupied(x, y, grid, monsters + items):
                continue
            monsters.append(create_monster(random_choice(monster_table, rng), x, y))

        for _ in range(rng.randint(0, tuning.max_room_items)):
            x = rng.randint(room.x1 + 1, room.x2 - 1)
            y = rng.randint(room.y1 + 1, room.y2 - 1)
            if _occupied(x, y, grid, monsters + items):
                continue
            items.append(create_item(random_choice(item_table, rng), x, y))

    stairs_pos = None
    if rooms:
        stairs_pos = rooms[-1].center()
        items.append(create_stairs(*stairs_pos))

    logger.debug(
        "level_populated",
        dungeon_level=dungeon_level,
        monsters=len(monsters),
        items=len(items),
    )
    return monsters, items, stairs_pos


def build_level(
    tuning: Tuning, rng: random.Random, dungeon_level: int
) -> tuple[TileGrid, list[Entity], list[Entity], tuple[int, int]]:
    """Generate and populate a level; returns the spawn point last."""
    grid, rooms = generate(
        tuning.map_width,
        tuning.map_height,
        tuning.max_rooms,
        tuning.room_min_size,
        tuning.room_max_size,
        rng,
    )
    monsters, items, _ = populate_level(grid, rooms, rng, tuning, dungeon_level)
    spawn = rooms[0].center() if rooms else (0, 0)
    return grid, monsters, items, spawn


def new_game(tuning: Tuning, rng: random.Random) -> GameState:
    """Create the player, build level 1 and greet them."""
    grid, monsters, items, spawn = build_level(tuning, rng, dungeon_level=1)
    player = create_player(*spawn)
    state = GameState(world=World(grid=grid), player=player, monsters=monsters, items=items)
    state.messages.add(WELCOME, colors.RED)
    logger.info("new_game_created", monsters=len(monsters), items=len(items))
    return state


def next_level(state: GameState, tuning: Tuning, rng: random.Random) -> None:
    """Rest, then descend: rebuild the map, keep the player and inventory."""
    state.messages.add(
        "You take a moment to rest, and recover your strength.", colors.VIOLET
    )
    if state.player.fighter is not None:
        heal(state.player, state.player.fighter.max_hp // 2)

    state.messages.add(
        "After a rare moment of peace, you descend deeper into "
        "the heart of the dungeon...",
        colors.RED,
    )
    state.world.dungeon_level += 1
    grid, monsters, items, spawn = build_level(tuning, rng, state.world.dungeon_level)
    state.world.grid = grid
    state.monsters = monsters
    state.items = items
    state.player.x, state.player.y = spawn
    logger.info("level_descended", dungeon_level=state.world.dungeon_level)
