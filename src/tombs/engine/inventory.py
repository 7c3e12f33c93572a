"""Pickup, drop, and item use.

Use dispatch returns ``True`` when the turn was spent (item consumed or
equipment toggled) and ``False`` when the effect was cancelled, in which
case the inventory, hit points and AI states are left exactly as they were.
"""

from collections.abc import Callable

from ..logging import get_logger
from . import colors
from .ai import confuse
from .combat import heal, take_damage
from .entities import Entity, ItemKind
from .fov import VisibilityOracle
from .state import GameState
from .tuning import Tuning

logger = get_logger(__name__)

# The input layer's "pick a tile or cancel" query. Receives the maximum range
# (None for unlimited) and returns the chosen tile, or None when aborted.
TargetPicker = Callable[[float | None], tuple[int, int] | None]


def pick_up(state: GameState, tuning: Tuning) -> bool:
    """Pick up the first item under the player. True if the turn was spent."""
    player = state.player
    index = next(
        (
            i
            for i, obj in enumerate(state.items)
            if obj.pos == player.pos and obj.item is not None
        ),
        None,
    )
    if index is None:
        return False

    if len(state.inventory) >= tuning.max_inventory:
        state.messages.add(
            f"Your inventory is full, cannot pick up {state.items[index].name}.",
            colors.RED,
        )
        return False

    # swap-remove: ground order is not preserved
    state.items[index], state.items[-1] = state.items[-1], state.items[index]
    item = state.items.pop()
    state.inventory.append(item)
    state.messages.add(f"You picked up a {item.name}!", colors.GREEN)
    return True


def drop_item(state: GameState, index: int) -> bool:
    if not 0 <= index < len(state.inventory):
        return False
    item = state.inventory.pop(index)
    if item.equipment is not None and item.equipment.equipped:
        _dequip(state, item)
    item.x, item.y = state.player.pos
    state.items.append(item)
    state.messages.add(f"You dropped a {item.name}.", colors.YELLOW)
    return True


def _cancel(state: GameState) -> bool:
    state.messages.add("Cancelled", colors.WHITE)
    return False


def closest_monster(
    state: GameState, max_range: float, oracle: VisibilityOracle
) -> Entity | None:
    """Nearest visible living monster no further than ``max_range``."""
    player = state.player
    closest = None
    closest_dist = max_range
    for monster in state.living_monsters():
        if not oracle.is_visible(monster.x, monster.y):
            continue
        dist = player.distance_to(monster)
        if dist <= closest_dist:
            closest, closest_dist = monster, dist
    return closest


def _credit(state: GameState, xp: int) -> None:
    if xp and state.player.fighter is not None:
        state.player.fighter.xp += xp


def _cast_heal(state, tuning, oracle, target_tile) -> bool:
    fighter = state.player.fighter
    if fighter is None:
        return _cancel(state)
    if fighter.hp == fighter.max_hp:
        state.messages.add("You are already at full health.", colors.RED)
        return _cancel(state)
    state.messages.add("Your wounds start to feel better!", colors.LIGHT_VIOLET)
    heal(state.player, tuning.heal_amount)
    return True


def _cast_lightning(state, tuning, oracle, target_tile) -> bool:
    monster = closest_monster(state, tuning.lightning_range, oracle)
    if monster is None:
        state.messages.add("No enemy is close enough to strike.", colors.RED)
        return _cancel(state)
    state.messages.add(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {tuning.lightning_damage} hit points.",
        colors.LIGHT_CYAN,
    )
    _credit(state, take_damage(monster, tuning.lightning_damage, state.messages))
    return True


def _cast_confuse(state, tuning, oracle, target_tile) -> bool:
    state.messages.add(
        "Choose an enemy to confuse.",
        colors.LIGHT_CYAN,
    )
    tile = target_tile(tuning.confuse_range)
    if tile is None:
        return _cancel(state)
    monster = state.monster_at(*tile)
    if monster is None or monster.ai is None:
        return _cancel(state)
    confuse(monster, tuning.confuse_num_turns)
    state.messages.add(
        f"The eyes of {monster.name} look vacant, as he starts to stumble around!",
        colors.LIGHT_GREEN,
    )
    return True


def _cast_fireball(state, tuning, oracle, target_tile) -> bool:
    state.messages.add(
        "Choose a target tile for the fireball.",
        colors.LIGHT_CYAN,
    )
    tile = target_tile(None)
    if tile is None:
        return _cancel(state)
    x, y = tile
    state.messages.add(
        f"The fireball explodes, burning everything within "
        f"{tuning.fireball_radius} tiles!",
        colors.ORANGE,
    )
    # the player gets burned too when standing inside the blast
    for target in [state.player, *state.monsters]:
        if target.fighter is None or not target.alive:
            continue
        if target.distance(x, y) <= tuning.fireball_radius:
            state.messages.add(
                f"The {target.name} gets burned for "
                f"{tuning.fireball_damage} hit points.",
                colors.ORANGE,
            )
            xp = take_damage(target, tuning.fireball_damage, state.messages)
            if target is not state.player:
                _credit(state, xp)
    return True


def _dequip(state: GameState, item: Entity) -> None:
    item.equipment.equipped = False
    state.messages.add(
        f"Dequipped {item.name} from {item.equipment.slot}.", colors.LIGHT_YELLOW
    )


def _equip(state: GameState, item: Entity) -> None:
    item.equipment.equipped = True
    state.messages.add(
        f"Equipped {item.name} on {item.equipment.slot}.", colors.LIGHT_GREEN
    )


def toggle_equipment(state: GameState, index: int) -> None:
    """Equip or dequip; equipping frees the slot from any other item first."""
    item = state.inventory[index]
    if item.equipment.equipped:
        _dequip(state, item)
        return
    for other in state.inventory:
        if (
            other is not item
            and other.equipment is not None
            and other.equipment.equipped
            and other.equipment.slot == item.equipment.slot
        ):
            _dequip(state, other)
    _equip(state, item)


_ITEM_EFFECTS: dict[ItemKind, Callable] = {
    ItemKind.HEAL: _cast_heal,
    ItemKind.LIGHTNING: _cast_lightning,
    ItemKind.CONFUSE: _cast_confuse,
    ItemKind.FIREBALL: _cast_fireball,
}


def use_item(
    state: GameState,
    index: int,
    oracle: VisibilityOracle,
    tuning: Tuning,
    target_tile: TargetPicker,
) -> bool:
    """Use the inventory item at ``index``. True if the turn was spent."""
    if not 0 <= index < len(state.inventory):
        return False
    item = state.inventory[index]

    if item.item is ItemKind.EQUIPMENT and item.equipment is not None:
        toggle_equipment(state, index)
        return True

    effect = _ITEM_EFFECTS.get(item.item)
    if effect is None:
        state.messages.add(f"The {item.name} cannot be used.", colors.WHITE)
        return False

    if not effect(state, tuning, oracle, target_tile):
        return False

    state.inventory.pop(index)
    logger.debug("item_used", item=item.name, kind=item.item.value)
    return True
