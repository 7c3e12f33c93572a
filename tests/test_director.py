"""Tests for level population, new games and descent."""

import random

import pytest

from tombs.engine.director import (
    ITEM_CHANCES,
    WELCOME,
    new_game,
    next_level,
    populate_level,
    random_choice,
)
from tombs.engine.entities import ItemKind, create_item
from tombs.engine.generator import Room, generate
from tombs.engine.tuning import Tuning
from tombs.engine.world import Transition, from_dungeon_level


def test_transition_table_is_a_step_function():
    table = [Transition(2, 1), Transition(3, 4), Transition(5, 6)]
    assert from_dungeon_level(table, 1) == 0
    assert from_dungeon_level(table, 2) == 1
    assert from_dungeon_level(table, 4) == 4
    assert from_dungeon_level(table, 50) == 6


def test_random_choice_skips_zero_weights():
    rng = random.Random(3)
    table = [("never", 0), ("always", 5)]
    assert {random_choice(table, rng) for _ in range(200)} == {"always"}


def test_random_choice_covers_positive_weights():
    rng = random.Random(3)
    table = [("orc", 80), ("troll", 20)]
    picks = [random_choice(table, rng) for _ in range(500)]
    assert set(picks) == {"orc", "troll"}
    assert picks.count("orc") > picks.count("troll")


def test_random_choice_needs_a_positive_weight():
    with pytest.raises(ValueError):
        random_choice([("a", 0)], random.Random(1))


def test_equipment_only_spawns_deeper():
    assert from_dungeon_level(ITEM_CHANCES["sword"], 1) == 0
    assert from_dungeon_level(ITEM_CHANCES["sword"], 4) == 5
    assert from_dungeon_level(ITEM_CHANCES["shield"], 7) == 0


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_populate_level_places_entities_inside_rooms(seed: int):
    tuning = Tuning()
    rng = random.Random(seed)
    grid, rooms = generate(80, 43, 30, 6, 10, rng)
    monsters, items, stairs = populate_level(grid, rooms, rng, tuning)

    interiors = set()
    for room in rooms:
        interiors.update(room.interior())

    assert len(monsters) <= len(rooms) * tuning.max_room_monsters
    positions = [m.pos for m in monsters]
    assert len(positions) == len(set(positions))
    for monster in monsters:
        assert monster.pos in interiors
        assert monster.ai is not None
        assert monster.name in ("orc", "troll")

    ground = [item for item in items if item.item is not None]
    assert len(ground) <= len(rooms) * tuning.max_room_items
    for item in ground:
        assert item.pos in interiors
        assert item.item is not ItemKind.EQUIPMENT


def test_no_monster_on_spawn_point():
    tuning = Tuning()
    for seed in range(20):
        rng = random.Random(seed)
        grid, rooms = generate(80, 43, 30, 6, 10, rng)
        monsters, _, _ = populate_level(grid, rooms, rng, tuning)
        assert rooms[0].center() not in {m.pos for m in monsters}


def test_stairs_at_last_room_center():
    rng = random.Random(8)
    grid, rooms = generate(80, 43, 30, 6, 10, rng)
    _, items, stairs = populate_level(grid, rooms, rng, Tuning())
    assert stairs == rooms[-1].center()
    stairs_entity = items[-1]
    assert stairs_entity.name == "stairs"
    assert stairs_entity.pos == stairs
    assert stairs_entity.always_visible
    assert not stairs_entity.blocks
    assert stairs_entity.fighter is None and stairs_entity.ai is None


def test_populate_without_rooms_places_nothing():
    rng = random.Random(1)
    grid, rooms = generate(5, 5, 3, 6, 10, rng)
    assert populate_level(grid, rooms, rng, Tuning()) == ([], [], None)


def test_populate_single_room_counts():
    tuning = Tuning(max_room_monsters=0, max_room_items=0)
    rng = random.Random(4)
    grid, _ = generate(30, 20, 1, 6, 6, rng)
    room = Room(1, 1, 7, 7)
    monsters, items, _ = populate_level(grid, [room], rng, tuning)
    assert monsters == []
    assert [item.name for item in items] == ["stairs"]


def test_new_game(tuning: Tuning):
    state = new_game(tuning, random.Random(21))
    assert state.world.dungeon_level == 1
    assert state.inventory == []
    assert not state.world.grid.is_blocked(*state.player.pos)
    assert state.messages.messages[0][0] == WELCOME
    assert state.player.fighter.hp == 30
    assert state.player.pos not in {m.pos for m in state.monsters}


def test_next_level_keeps_player_inventory_and_log(tuning: Tuning):
    state = new_game(tuning, random.Random(5))
    potion = create_item("heal", 0, 0)
    state.inventory.append(potion)
    state.player.fighter.hp = 10
    log_length = len(state.messages)

    next_level(state, tuning, random.Random(6))

    assert state.world.dungeon_level == 2
    assert state.inventory == [potion]
    assert len(state.messages) == log_length + 2
    assert state.player.fighter.hp == 25
    assert not state.world.grid.is_blocked(*state.player.pos)
