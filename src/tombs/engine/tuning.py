"""Numeric tuning for the simulation.

Every constant the engine consumes lives here and is passed explicitly into
generation, combat, item and leveling code. Any field can be overridden with
a ``TOMBS_<FIELD>`` environment variable, e.g. ``TOMBS_MAX_ROOMS=12``.
"""

import os
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Tuning:
    """Game balance constants."""

    map_width: int = 80
    map_height: int = 43
    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30
    max_room_monsters: int = 3
    max_room_items: int = 2
    max_inventory: int = 26

    heal_amount: int = 4
    lightning_damage: int = 40
    lightning_range: int = 5
    confuse_range: int = 8
    confuse_num_turns: int = 10
    fireball_radius: int = 3
    fireball_damage: int = 25

    level_up_base: int = 200
    level_up_factor: int = 150
    torch_radius: int = 10

    @classmethod
    def from_env(cls) -> "Tuning":
        """Load tuning, letting environment variables override defaults."""
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(f"TOMBS_{f.name.upper()}")
            if raw:
                overrides[f.name] = int(raw)
        return cls(**overrides)
