"""Experience thresholds and level-up stat boosts."""

from enum import Enum

from ..logging import get_logger
from . import colors
from .entities import Entity
from .state import GameState
from .tuning import Tuning

logger = get_logger(__name__)


class LevelUpStat(Enum):
    CONSTITUTION = "hp"  # +20 max hp
    STRENGTH = "power"  # +1 attack
    AGILITY = "defense"  # +1 defense


def level_up_xp(level: int, tuning: Tuning) -> int:
    return tuning.level_up_base + level * tuning.level_up_factor


def check_level_up(state: GameState, tuning: Tuning) -> bool:
    """Level the player up once if enough xp has been gathered.

    The surplus above the threshold carries over. Returns True when a
    stat choice is now pending.
    """
    player = state.player
    fighter = player.fighter
    if fighter is None or player.level_up_pending:
        return player.level_up_pending

    threshold = level_up_xp(player.level, tuning)
    if fighter.xp < threshold:
        return False

    player.level += 1
    fighter.xp -= threshold
    player.level_up_pending = True
    state.messages.add(
        f"Your battle skills grow stronger! You reached level {player.level}!",
        colors.YELLOW,
    )
    logger.info("level_up", level=player.level, xp=fighter.xp)
    return True


def apply_level_up(player: Entity, stat: LevelUpStat) -> bool:
    """Spend a pending level-up on one stat. False if nothing was pending."""
    if not player.level_up_pending or player.fighter is None:
        return False

    fighter = player.fighter
    match stat:
        case LevelUpStat.CONSTITUTION:
            fighter.max_hp += 20
            fighter.hp += 20
        case LevelUpStat.STRENGTH:
            fighter.power += 1
        case LevelUpStat.AGILITY:
            fighter.defense += 1
    player.level_up_pending = False
    return True
