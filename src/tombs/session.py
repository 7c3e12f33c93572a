"""Session layer bridging the game engine and the database."""

import datetime as dt
import random

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .engine.codec import PersistenceError, SaveError, dumps_state, loads_state
from .engine.commands import (
    get_character_info,
    get_inventory,
    get_status,
    handle_command,
    make_oracle,
    render_map,
)
from .engine.director import new_game
from .engine.state import GameState
from .engine.tuning import Tuning
from .logging import get_logger
from .models import Player, SavedGame

logger = get_logger(__name__)

MESSAGE_TAIL = 6


def get_or_create_player(session: Session, fingerprint: str) -> Player:
    """Get existing player or create new one from certificate fingerprint."""
    player = session.exec(
        select(Player).where(Player.fingerprint == fingerprint)
    ).first()

    if player is None:
        player = Player(fingerprint=fingerprint)
        session.add(player)
        logger.info("player_created", fingerprint=fingerprint)
    else:
        player.last_seen = dt.datetime.now(dt.UTC)

    session.commit()
    session.refresh(player)
    return player


def make_rng(seed: int | None, salt: int) -> random.Random:
    """Fresh RNG per request; with a fixed seed, runs replay deterministically."""
    if seed is None:
        return random.Random()
    return random.Random(seed * 1_000_003 + salt)


class TombsSession:
    """Wraps a Player + SavedGame + in-memory GameState."""

    def __init__(
        self,
        db_session: Session,
        player: Player,
        saved_game: SavedGame | None,
        game_state: GameState,
        tuning: Tuning,
        seed: int | None = None,
    ):
        self.db_session = db_session
        self.player = player
        self.saved_game = saved_game
        self.state = game_state
        self.tuning = tuning
        self.seed = seed

    @classmethod
    def load_or_create(
        cls,
        db_session: Session,
        player: Player,
        tuning: Tuning,
        seed: int | None = None,
    ) -> "TombsSession":
        """Load the player's save slot or start a fresh game."""
        saved_game = db_session.exec(
            select(SavedGame).where(SavedGame.player_id == player.id)
        ).first()

        game_state = None
        if saved_game is not None:
            try:
                game_state = loads_state(saved_game.state_blob)
            except PersistenceError as exc:
                logger.warning(
                    "save_unreadable", fingerprint=player.fingerprint, error=str(exc)
                )
            else:
                game_state.turns = saved_game.turns
                logger.debug(
                    "game_loaded",
                    fingerprint=player.fingerprint,
                    turns=saved_game.turns,
                )

        if game_state is None:
            game_state = new_game(tuning, make_rng(seed, 0))
            logger.info("new_game_started", fingerprint=player.fingerprint)

        return cls(db_session, player, saved_game, game_state, tuning, seed)

    def _rng(self) -> random.Random:
        return make_rng(self.seed, self.state.turns + 1)

    def process_command(self, raw_input: str) -> str:
        """Delegate to the engine and return response text."""
        return handle_command(self.state, raw_input, self.tuning, self._rng())

    def save(self) -> None:
        """Serialize state back to the player's save slot.

        Raises SaveError when the database refuses the write; the game in
        memory is untouched and the next save can try again.
        """
        now = dt.datetime.now(dt.UTC)
        blob = dumps_state(self.state)
        summary = {
            "state_blob": blob,
            "turns": self.state.turns,
            "dungeon_level": self.state.world.dungeon_level,
            "character_level": self.state.player.level,
            "is_finished": self.state.is_finished,
            "last_played": now,
        }

        created = self.saved_game is None
        if created:
            self.saved_game = SavedGame(
                player_id=self.player.id, started_at=now, **summary
            )
            self.db_session.add(self.saved_game)
        else:
            for key, value in summary.items():
                setattr(self.saved_game, key, value)

        try:
            self.db_session.commit()
        except SQLAlchemyError as exc:
            self.db_session.rollback()
            if created:
                self.saved_game = None
            logger.warning(
                "save_failed", fingerprint=self.player.fingerprint, error=str(exc)
            )
            raise SaveError(f"could not store the game: {exc}") from exc
        logger.debug(
            "game_saved",
            fingerprint=self.player.fingerprint,
            turns=self.state.turns,
            dungeon_level=self.state.world.dungeon_level,
        )

    def get_map(self) -> list[str]:
        return render_map(self.state, make_oracle(self.state, self.tuning))

    def get_status(self) -> str:
        return get_status(self.state)

    def get_inventory(self) -> list[str]:
        return get_inventory(self.state)

    def get_character_info(self) -> list[str]:
        return get_character_info(self.state, self.tuning)

    def get_messages(self) -> list[str]:
        return [text for text, _ in self.state.messages.tail(MESSAGE_TAIL)]

    def reset(self) -> None:
        """Throw the current game away and start a new one."""
        self.state = new_game(self.tuning, make_rng(self.seed, 0))
        if self.saved_game:
            self.db_session.delete(self.saved_game)
            self.db_session.commit()
            self.saved_game = None
        logger.info("game_reset", fingerprint=self.player.fingerprint)
