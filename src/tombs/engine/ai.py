"""Monster AI state machine.

``decide`` never mutates the monster's position or the player: it returns a
``MonsterAction`` describing what to do plus the AI state to install
afterwards, and the turn scheduler applies both. Decisions are made
against a snapshot of blocking positions taken at the start of the monster
phase.
"""

import math
import random
from dataclasses import dataclass

from . import colors
from .entities import AI, BasicAI, ConfusedAI, Entity
from .fov import VisibilityOracle
from .tiles import TileGrid
from .world import MessageLog


@dataclass(frozen=True)
class Step:
    dx: int
    dy: int


@dataclass(frozen=True)
class AttackPlayer:
    pass


@dataclass(frozen=True)
class Idle:
    pass


MonsterAction = Step | AttackPlayer | Idle


def round_half_away(value: float) -> int:
    """Round to the nearest int, ties away from zero (0.5 -> 1, -0.5 -> -1)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def step_towards(x: int, y: int, target_x: int, target_y: int) -> tuple[int, int]:
    """One grid step along the normalized direction vector."""
    dx = target_x - x
    dy = target_y - y
    distance = math.sqrt(dx**2 + dy**2)
    if distance == 0:
        return (0, 0)
    return (round_half_away(dx / distance), round_half_away(dy / distance))


def _free(
    grid: TileGrid, blockers: set[tuple[int, int]], player: Entity, x: int, y: int
) -> bool:
    if grid.is_blocked(x, y) or (x, y) in blockers:
        return False
    return not (player.blocks and player.pos == (x, y))


def _move(
    monster: Entity,
    dx: int,
    dy: int,
    grid: TileGrid,
    blockers: set[tuple[int, int]],
    player: Entity,
) -> MonsterAction:
    if (dx, dy) == (0, 0):
        return Idle()
    if not _free(grid, blockers, player, monster.x + dx, monster.y + dy):
        return Idle()
    return Step(dx, dy)


def _basic(
    monster: Entity,
    player: Entity,
    grid: TileGrid,
    blockers: set[tuple[int, int]],
    oracle: VisibilityOracle,
) -> MonsterAction:
    # if you can see it, it can see you
    if not oracle.is_visible(monster.x, monster.y):
        return Idle()
    if monster.distance_to(player) >= 2.0:
        dx, dy = step_towards(monster.x, monster.y, player.x, player.y)
        return _move(monster, dx, dy, grid, blockers, player)
    if player.fighter is not None and player.fighter.hp > 0:
        return AttackPlayer()
    return Idle()


def decide(
    monster: Entity,
    player: Entity,
    grid: TileGrid,
    blockers: set[tuple[int, int]],
    oracle: VisibilityOracle,
    rng: random.Random,
    messages: MessageLog,
) -> tuple[MonsterAction, AI | None]:
    """Pick this turn's action and the AI state for the next turn.

    ``blockers`` holds the positions of the other blocking monsters, not
    including ``monster`` itself.
    """
    match monster.ai:
        case BasicAI():
            return _basic(monster, player, grid, blockers, oracle), monster.ai
        case ConfusedAI(previous_ai=previous, num_turns=turns) if turns >= 0:
            dx, dy = rng.randint(-1, 1), rng.randint(-1, 1)
            action = _move(monster, dx, dy, grid, blockers, player)
            return action, ConfusedAI(previous_ai=previous, num_turns=turns - 1)
        case ConfusedAI(previous_ai=previous):
            messages.add(f"The {monster.name} is no longer confused!", colors.RED)
            return Idle(), previous
        case _:
            return Idle(), monster.ai


def confuse(monster: Entity, num_turns: int) -> None:
    """Suspend the monster's current AI behind a confused state."""
    monster.ai = ConfusedAI(previous_ai=monster.ai, num_turns=num_turns)
