"""Text command layer.

handle_command(state, raw_input, tuning, rng) -> str is the main entry point
for the Gemini capsule. It decodes a typed command into an engine action,
runs one turn and returns the messages that turn produced. Inventory slots
are addressed by letter, as in "use b" or "drop c"; targeted scrolls take a
tile, as in "use a at 12 7".
"""

import random
import string
from collections.abc import Callable

from .fov import FieldOfView
from .leveling import LevelUpStat, level_up_xp
from .state import GameState
from .tuning import Tuning
from .turns import (
    Action,
    ChooseLevelUp,
    Descend,
    DropItem,
    Move,
    PickUp,
    PlayerAction,
    Quit,
    UseItem,
    Wait,
    play_turn,
)

DIRECTIONS: dict[str, tuple[int, int]] = {
    **dict.fromkeys(("n", "north"), (0, -1)),
    **dict.fromkeys(("s", "south"), (0, 1)),
    **dict.fromkeys(("e", "east"), (1, 0)),
    **dict.fromkeys(("w", "west"), (-1, 0)),
    **dict.fromkeys(("ne", "northeast"), (1, -1)),
    **dict.fromkeys(("nw", "northwest"), (-1, -1)),
    **dict.fromkeys(("se", "southeast"), (1, 1)),
    **dict.fromkeys(("sw", "southwest"), (-1, 1)),
}

LEVEL_UP_CHOICES: dict[str, LevelUpStat] = {
    **dict.fromkeys(("hp", "constitution", "con"), LevelUpStat.CONSTITUTION),
    **dict.fromkeys(("power", "strength", "str"), LevelUpStat.STRENGTH),
    **dict.fromkeys(("defense", "agility", "agi"), LevelUpStat.AGILITY),
}

INVENTORY_LETTERS = string.ascii_lowercase


def _slot_index(word: str | None) -> int | None:
    if word is None or len(word) != 1 or word not in INVENTORY_LETTERS:
        return None
    return INVENTORY_LETTERS.index(word)


def _parse_use(args: list[str]) -> Action | None:
    if not args:
        return None
    index = _slot_index(args[0])
    if index is None:
        return None
    if len(args) == 1:
        return UseItem(index)
    # use <slot> at <x> <y>
    if len(args) == 4 and args[1] == "at" and args[2].isdigit() and args[3].isdigit():
        return UseItem(index, target=(int(args[2]), int(args[3])))
    return None


def _parse_drop(args: list[str]) -> Action | None:
    index = _slot_index(args[0]) if len(args) == 1 else None
    return DropItem(index) if index is not None else None


def _parse_level(args: list[str]) -> Action | None:
    stat = LEVEL_UP_CHOICES.get(args[0]) if len(args) == 1 else None
    return ChooseLevelUp(stat) if stat is not None else None


def _no_args(action: Action) -> Callable[[list[str]], Action | None]:
    def parse(args: list[str]) -> Action | None:
        return None if args else action

    return parse


_VERB_DISPATCH: dict[str, Callable[[list[str]], Action | None]] = {
    **dict.fromkeys(("wait", "rest", "z", "."), _no_args(Wait())),
    **dict.fromkeys(("get", "take", "g", "pickup"), _no_args(PickUp())),
    **dict.fromkeys(("descend", "down", ">"), _no_args(Descend())),
    **dict.fromkeys(("quit", "q", "exit"), _no_args(Quit())),
    **dict.fromkeys(("use", "read", "quaff", "wear", "wield"), _parse_use),
    "drop": _parse_drop,
    "level": _parse_level,
}


def parse_command(raw_input: str) -> Action | None:
    """Decode one typed command, or None when it makes no sense."""
    words = raw_input.strip().lower().split()
    if not words:
        return None
    verb, args = words[0], words[1:]
    if verb in DIRECTIONS and not args:
        return Move(*DIRECTIONS[verb])
    if verb in ("go", "move") and len(args) == 1 and args[0] in DIRECTIONS:
        return Move(*DIRECTIONS[args[0]])
    parse = _VERB_DISPATCH.get(verb)
    if parse is None:
        return None
    return parse(args)


def make_oracle(state: GameState, tuning: Tuning) -> FieldOfView:
    """Field of view for the current level, computed from the player."""
    fov = FieldOfView(state.world.grid)
    fov.recompute_from(state.player.x, state.player.y, tuning.torch_radius)
    return fov


def handle_command(
    state: GameState, raw_input: str, tuning: Tuning, rng: random.Random
) -> str:
    """Process a command and return the response text."""
    action = parse_command(raw_input)
    if action is None:
        return "I don't understand that."

    before = len(state.messages)
    oracle = make_oracle(state, tuning)
    result = play_turn(state, action, oracle, tuning, rng)

    if result is PlayerAction.EXIT:
        return "Your game has been saved. Come back soon."
    lines = [text for text, _ in state.messages.messages[before:]]
    if state.player.level_up_pending:
        lines.append(
            "Choose a stat to improve: level hp, level power or level defense."
        )
    if not lines and result is PlayerAction.DID_NOT_TAKE_TURN:
        if not state.player.alive:
            return "You are dead. Start a new game to try again."
        return "Nothing happens."
    return "\n".join(lines)


def get_inventory(state: GameState) -> list[str]:
    """Inventory lines, lettered for "use" and "drop"."""
    lines = []
    for letter, item in zip(INVENTORY_LETTERS, state.inventory):
        text = f"{letter}) {item.name}"
        if item.equipment is not None and item.equipment.equipped:
            text += f" (on {item.equipment.slot})"
        lines.append(text)
    return lines


def get_character_info(state: GameState, tuning: Tuning) -> list[str]:
    player = state.player
    fighter = player.fighter
    if fighter is None:
        return []
    return [
        f"Level: {player.level}",
        f"Experience: {fighter.xp}",
        f"Experience to level up: {level_up_xp(player.level, tuning)}",
        f"Maximum HP: {fighter.max_hp}",
        f"Attack: {fighter.power}",
        f"Defense: {fighter.defense}",
    ]


def get_status(state: GameState) -> str:
    fighter = state.player.fighter
    hp = fighter.hp if fighter else 0
    max_hp = fighter.max_hp if fighter else 0
    return (
        f"HP {hp}/{max_hp}  Dungeon level {state.world.dungeon_level}  "
        f"Turn {state.turns}"
    )


def render_map(state: GameState, oracle: FieldOfView) -> list[str]:
    """ASCII view of the level: the layout, what is in sight, and the player."""
    grid = state.world.grid
    rows = [
        ["#" if grid.blocks_sight(x, y) else "." for x in range(grid.width)]
        for y in range(grid.height)
    ]
    # corpses and items first so living monsters draw over them
    drawables = sorted(state.items + state.monsters, key=lambda e: e.blocks)
    for entity in drawables:
        if entity.always_visible or oracle.is_visible(entity.x, entity.y):
            if grid.in_bounds(entity.x, entity.y):
                rows[entity.y][entity.x] = entity.glyph
    player = state.player
    if grid.in_bounds(player.x, player.y):
        rows[player.y][player.x] = player.glyph
    return ["".join(row) for row in rows]
