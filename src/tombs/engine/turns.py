"""Turn scheduler: one player action, then the monster phase.

``play_turn`` is the single entry point the input layer calls. Monsters only
act when the player actually spends time, and never before the player's
action has fully resolved.
"""

import random
from dataclasses import dataclass
from enum import Enum

from ..logging import get_logger
from . import colors
from .ai import AttackPlayer, Step, decide
from .combat import attack
from .director import next_level
from .fov import VisibilityOracle
from .inventory import TargetPicker, drop_item, pick_up, use_item
from .leveling import LevelUpStat, apply_level_up, check_level_up
from .state import GameState
from .tuning import Tuning

logger = get_logger(__name__)


class PlayerAction(Enum):
    TOOK_TURN = "took_turn"
    DID_NOT_TAKE_TURN = "did_not_take_turn"
    EXIT = "exit"


@dataclass(frozen=True)
class Move:
    """Step one tile; bumping into a monster attacks it."""

    dx: int
    dy: int


@dataclass(frozen=True)
class Wait:
    pass


@dataclass(frozen=True)
class PickUp:
    pass


@dataclass(frozen=True)
class UseItem:
    index: int
    target: tuple[int, int] | None = None


@dataclass(frozen=True)
class DropItem:
    index: int


@dataclass(frozen=True)
class Descend:
    pass


@dataclass(frozen=True)
class ChooseLevelUp:
    stat: LevelUpStat


@dataclass(frozen=True)
class Quit:
    pass


Action = Move | Wait | PickUp | UseItem | DropItem | Descend | ChooseLevelUp | Quit


def _no_target(max_range: float | None) -> tuple[int, int] | None:
    return None


def _fixed_target(tile: tuple[int, int]) -> TargetPicker:
    """A picker that always answers with a tile chosen up front."""

    def pick(max_range: float | None) -> tuple[int, int] | None:
        return tile

    return pick


def validated_picker(
    state: GameState, oracle: VisibilityOracle, picker: TargetPicker
) -> TargetPicker:
    """Wrap the input layer's picker so only visible, in-range tiles count."""

    def pick(max_range: float | None) -> tuple[int, int] | None:
        tile = picker(max_range)
        if tile is None:
            return None
        x, y = tile
        if not state.world.grid.in_bounds(x, y) or not oracle.is_visible(x, y):
            return None
        if max_range is not None and state.player.distance(x, y) > max_range:
            return None
        return tile

    return pick


def _player_move_or_attack(state: GameState, dx: int, dy: int) -> None:
    player = state.player
    x, y = player.x + dx, player.y + dy
    target = state.monster_at(x, y)
    if target is not None:
        attack(player, target, state.messages)
    elif not state.is_blocked(x, y):
        player.x, player.y = x, y


def _on_stairs(state: GameState) -> bool:
    return any(
        obj.name == "stairs" and obj.item is None and obj.pos == state.player.pos
        for obj in state.items
    )


def _resolve_player_action(
    state: GameState,
    action: Action,
    oracle: VisibilityOracle,
    tuning: Tuning,
    rng: random.Random,
    target_picker: TargetPicker,
) -> PlayerAction:
    match action:
        case Quit():
            return PlayerAction.EXIT
        case ChooseLevelUp(stat=stat):
            apply_level_up(state.player, stat)
            return PlayerAction.DID_NOT_TAKE_TURN
        case Move(dx=dx, dy=dy):
            _player_move_or_attack(state, dx, dy)
            return PlayerAction.TOOK_TURN
        case Wait():
            return PlayerAction.TOOK_TURN
        case PickUp():
            took = pick_up(state, tuning)
        case UseItem(index=index, target=target):
            picker = _fixed_target(target) if target is not None else target_picker
            took = use_item(
                state, index, oracle, tuning, validated_picker(state, oracle, picker)
            )
        case DropItem(index=index):
            took = drop_item(state, index)
        case Descend():
            if _on_stairs(state):
                next_level(state, tuning, rng)
            else:
                state.messages.add("There are no stairs here.", colors.WHITE)
            return PlayerAction.DID_NOT_TAKE_TURN
        case _:
            return PlayerAction.DID_NOT_TAKE_TURN
    return PlayerAction.TOOK_TURN if took else PlayerAction.DID_NOT_TAKE_TURN


def run_monster_phase(
    state: GameState, oracle: VisibilityOracle, rng: random.Random
) -> None:
    """Let every monster with an AI act once, in list order.

    Each monster decides against the blocking positions as they were when
    the phase began. A step into a tile that a sibling moved into earlier in
    the same phase is dropped when applied.
    """
    snapshot = [m.pos if m.blocks else None for m in state.monsters]
    grid = state.world.grid

    for index, monster in enumerate(state.monsters):
        if monster.ai is None:
            continue
        blockers = {pos for i, pos in enumerate(snapshot) if i != index and pos}
        action, next_ai = decide(
            monster, state.player, grid, blockers, oracle, rng, state.messages
        )
        match action:
            case Step(dx=dx, dy=dy):
                x, y = monster.x + dx, monster.y + dy
                if not state.is_blocked(x, y):
                    monster.x, monster.y = x, y
            case AttackPlayer():
                attack(monster, state.player, state.messages)
        if monster.ai is not None:
            monster.ai = next_ai


def play_turn(
    state: GameState,
    action: Action,
    oracle: VisibilityOracle,
    tuning: Tuning,
    rng: random.Random,
    target_picker: TargetPicker | None = None,
) -> PlayerAction:
    """Resolve one player action and, if it took time, the monster phase."""
    player = state.player

    if isinstance(action, Quit):
        return PlayerAction.EXIT
    if player.level_up_pending and not isinstance(action, ChooseLevelUp):
        return PlayerAction.DID_NOT_TAKE_TURN
    if not player.alive:
        return PlayerAction.DID_NOT_TAKE_TURN

    start = player.pos
    result = _resolve_player_action(
        state, action, oracle, tuning, rng, target_picker or _no_target
    )
    if result is not PlayerAction.TOOK_TURN:
        return result

    state.turns += 1
    if player.pos != start:
        oracle.recompute_from(player.x, player.y, tuning.torch_radius)
    if player.alive:
        run_monster_phase(state, oracle, rng)
        check_level_up(state, tuning)
    if not player.alive:
        state.is_finished = True
    logger.debug(
        "turn_resolved",
        turn=state.turns,
        action=type(action).__name__,
        monsters=len(state.living_monsters()),
    )
    return result
