"""Entities: the player, monsters, ground items and the stairs.

All of these are plain dataclasses holding primitives, enums and nested
dataclasses, so the whole graph pickles cleanly for persistence.
"""

import math
from dataclasses import dataclass
from enum import Enum

from . import colors
from .colors import Color


class DeathTag(Enum):
    """Which death transition a fighter goes through when hp drops to 0."""

    PLAYER = "player"
    MONSTER = "monster"


@dataclass
class Fighter:
    """Combat stats. For monsters ``xp`` is the reward for killing them."""

    max_hp: int
    hp: int
    defense: int
    power: int
    xp: int = 0
    on_death: DeathTag = DeathTag.MONSTER


@dataclass(frozen=True)
class BasicAI:
    """Chase the player while in sight, attack when adjacent."""


@dataclass(frozen=True)
class ConfusedAI:
    """Stumble around randomly, then go back to ``previous_ai``."""

    previous_ai: "AI"
    num_turns: int


AI = BasicAI | ConfusedAI


class ItemKind(Enum):
    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"
    FIREBALL = "fireball"
    EQUIPMENT = "equipment"


class Slot(Enum):
    LEFT_HAND = "left hand"
    RIGHT_HAND = "right hand"
    HEAD = "head"

    def __str__(self) -> str:
        return self.value


@dataclass
class Equipment:
    slot: Slot
    equipped: bool = False


@dataclass
class Entity:
    """Anything that sits on the map.

    ``fighter`` and ``ai`` are set for monsters; ``item`` (and ``equipment``
    for wearable items) for things that can be picked up. ``level`` and
    ``level_up_pending`` only mean something for the player.
    """

    x: int
    y: int
    glyph: str
    color: Color
    name: str
    blocks: bool = False
    alive: bool = False
    fighter: Fighter | None = None
    ai: AI | None = None
    item: ItemKind | None = None
    equipment: Equipment | None = None
    always_visible: bool = False
    level: int = 1
    level_up_pending: bool = False

    @property
    def pos(self) -> tuple[int, int]:
        return (self.x, self.y)

    def distance(self, x: int, y: int) -> float:
        """Euclidean distance to a tile."""
        return math.sqrt((x - self.x) ** 2 + (y - self.y) ** 2)

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)


# Base stats for each monster kind: (glyph, color, max_hp, defense, power, xp)
MONSTER_KINDS: dict[str, tuple[str, Color, int, int, int, int]] = {
    "orc": ("o", colors.DESATURATED_GREEN, 10, 0, 3, 35),
    "troll": ("T", colors.DARKER_GREEN, 16, 1, 4, 100),
}

# Ground item prototypes: (glyph, color, display name, kind, slot)
ITEM_KINDS: dict[str, tuple[str, Color, str, ItemKind, Slot | None]] = {
    "heal": ("!", colors.VIOLET, "healing potion", ItemKind.HEAL, None),
    "lightning": (
        "#", colors.LIGHT_YELLOW, "scroll of lightning bolt", ItemKind.LIGHTNING, None
    ),
    "fireball": ("#", colors.LIGHT_YELLOW, "scroll of fireball", ItemKind.FIREBALL, None),
    "confuse": (
        "#", colors.LIGHT_YELLOW, "scroll of confusion", ItemKind.CONFUSE, None
    ),
    "sword": ("/", colors.SKY, "sword", ItemKind.EQUIPMENT, Slot.RIGHT_HAND),
    "shield": ("[", colors.DARKER_ORANGE, "shield", ItemKind.EQUIPMENT, Slot.LEFT_HAND),
    "helmet": ("^", colors.YELLOW, "helmet", ItemKind.EQUIPMENT, Slot.HEAD),
}


def create_player(x: int, y: int) -> Entity:
    return Entity(
        x,
        y,
        "@",
        colors.WHITE,
        "player",
        blocks=True,
        alive=True,
        fighter=Fighter(
            max_hp=30, hp=30, defense=2, power=5, xp=0, on_death=DeathTag.PLAYER
        ),
    )


def create_monster(kind: str, x: int, y: int) -> Entity:
    """Instantiate a monster with its kind's fixed base stats."""
    glyph, color, max_hp, defense, power, xp = MONSTER_KINDS[kind]
    return Entity(
        x,
        y,
        glyph,
        color,
        kind,
        blocks=True,
        alive=True,
        fighter=Fighter(
            max_hp=max_hp,
            hp=max_hp,
            defense=defense,
            power=power,
            xp=xp,
            on_death=DeathTag.MONSTER,
        ),
        ai=BasicAI(),
    )


def create_item(kind: str, x: int, y: int) -> Entity:
    glyph, color, name, item_kind, slot = ITEM_KINDS[kind]
    return Entity(
        x,
        y,
        glyph,
        color,
        name,
        item=item_kind,
        equipment=Equipment(slot=slot) if slot is not None else None,
        # equipment shows up on the map even out of sight
        always_visible=slot is not None,
    )


def create_stairs(x: int, y: int) -> Entity:
    return Entity(x, y, ">", colors.WHITE, "stairs", always_visible=True)
