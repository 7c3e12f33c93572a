"""Tests for the database-backed game session."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from tombs.engine.codec import SaveError
from tombs.engine.tuning import Tuning
from tombs.models import Player, SavedGame
from tombs.session import TombsSession, get_or_create_player, make_rng


def test_get_or_create_player(db_session: Session):
    player = get_or_create_player(db_session, "fp-1")
    again = get_or_create_player(db_session, "fp-1")
    assert player.id is not None
    assert again.id == player.id
    assert len(db_session.exec(select(Player)).all()) == 1


def test_make_rng_is_reproducible_when_seeded():
    assert make_rng(7, 3).random() == make_rng(7, 3).random()
    assert make_rng(7, 3).random() != make_rng(7, 4).random()


def test_new_player_gets_a_new_game(db_session: Session, test_player: Player):
    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    assert game.saved_game is None
    assert game.state.world.dungeon_level == 1
    assert game.get_messages()[0].startswith("Welcome stranger!")


def test_seeded_games_are_identical(db_session: Session, test_player: Player):
    first = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    second = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    assert first.get_map() == second.get_map()


def test_save_and_resume(db_session: Session, test_player: Player):
    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    game.process_command("wait")
    game.process_command("wait")
    game.save()

    saved = db_session.exec(select(SavedGame)).one()
    assert saved.player_id == test_player.id
    assert saved.turns == game.state.turns
    assert saved.dungeon_level == 1
    assert saved.character_level == 1

    resumed = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    assert resumed.state.turns == game.state.turns
    assert resumed.state.player.pos == game.state.player.pos
    assert resumed.get_map() == game.get_map()


def test_save_updates_the_same_slot(db_session: Session, test_player: Player):
    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    game.save()
    game.process_command("wait")
    game.save()
    assert len(db_session.exec(select(SavedGame)).all()) == 1


def test_unreadable_save_starts_over(db_session: Session, test_player: Player):
    db_session.add(SavedGame(player_id=test_player.id, state_blob=b"junk", turns=40))
    db_session.commit()

    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)

    assert game.state.turns == 0
    assert game.state.world.dungeon_level == 1
    # the broken slot is overwritten on the next save
    game.save()
    assert db_session.exec(select(SavedGame)).one().turns == 0


def test_reset(db_session: Session, test_player: Player):
    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)
    game.process_command("wait")
    game.save()

    game.reset()

    assert game.saved_game is None
    assert game.state.turns == 0
    assert db_session.exec(select(SavedGame)).first() is None


def test_display_helpers(db_session: Session, test_player: Player):
    tuning = Tuning()
    game = TombsSession.load_or_create(db_session, test_player, tuning, seed=7)

    lines = game.get_map()
    assert len(lines) == tuning.map_height
    assert all(len(line) == tuning.map_width for line in lines)
    assert sum(line.count("@") for line in lines) == 1
    assert game.get_status().startswith("HP 30/30")
    assert game.get_inventory() == []
    assert game.get_character_info()[0] == "Level: 1"


def test_failed_commit_raises_save_error(
    db_session: Session, test_player: Player, monkeypatch: pytest.MonkeyPatch
):
    game = TombsSession.load_or_create(db_session, test_player, Tuning(), seed=7)

    def locked():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", locked)
    with pytest.raises(SaveError):
        game.save()
    assert game.saved_game is None

    # once the database recovers the same game saves normally
    monkeypatch.undo()
    game.save()
    assert db_session.exec(select(SavedGame)).one().player_id == test_player.id
