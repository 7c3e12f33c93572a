"""Damage formula and death transitions.

Shared by melee (player and monsters) and item effects. Functions return the
experience a kill awards so the caller can credit whoever landed the blow.
"""

from ..logging import get_logger
from . import colors
from .entities import DeathTag, Entity
from .world import MessageLog

logger = get_logger(__name__)


def damage_for(power: int, defense: int) -> int:
    return max(0, power - defense)


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def attack(attacker: Entity, target: Entity, messages: MessageLog) -> int:
    """Melee attack. Returns xp awarded if the target died, else 0.

    Kills by the player are credited to the player's fighter here.
    """
    if attacker.fighter is None or target.fighter is None:
        return 0

    damage = damage_for(attacker.fighter.power, target.fighter.defense)
    if damage == 0:
        messages.add(
            f"{_capitalize(attacker.name)} attacks {target.name} but it has no effect!",
            colors.WHITE,
        )
        return 0

    messages.add(
        f"{_capitalize(attacker.name)} attacks {target.name} for {damage} hit points.",
        colors.WHITE,
    )
    xp = take_damage(target, damage, messages)
    if xp and attacker.fighter.on_death is DeathTag.PLAYER:
        attacker.fighter.xp += xp
    return xp


def take_damage(target: Entity, damage: int, messages: MessageLog) -> int:
    """Apply damage and run the death transition at most once."""
    fighter = target.fighter
    if fighter is None or not target.alive:
        return 0
    if damage > 0:
        fighter.hp -= damage
    if fighter.hp > 0:
        return 0

    match fighter.on_death:
        case DeathTag.PLAYER:
            _player_death(target, messages)
            return 0
        case DeathTag.MONSTER:
            return _monster_death(target, messages)


def heal(target: Entity, amount: int) -> None:
    fighter = target.fighter
    if fighter is None:
        return
    fighter.hp = min(fighter.hp + amount, fighter.max_hp)


def _player_death(player: Entity, messages: MessageLog) -> None:
    # the player stays on the map as a corpse
    messages.add("You died!", colors.RED)
    player.alive = False
    player.glyph = "%"
    player.color = colors.DARK_RED
    logger.info("player_died", name=player.name)


def _monster_death(monster: Entity, messages: MessageLog) -> int:
    xp = monster.fighter.xp
    messages.add(
        f"{_capitalize(monster.name)} is dead! You gain {xp} experience points.",
        colors.ORANGE,
    )
    logger.debug("monster_killed", name=monster.name, xp=xp)
    monster.alive = False
    monster.glyph = "%"
    monster.color = colors.DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"
    return xp
