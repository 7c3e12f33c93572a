"""Save/load codec.

A save is a zlib-compressed pickle of ``(world, player, monsters, items)``.
The same blob is what the session stores in the database; ``save_game`` and
``load_game`` additionally offer a single on-disk save slot.
"""

import os
import pickle
import zlib
from pathlib import Path

from ..logging import get_logger
from .entities import Entity
from .state import GameState
from .tiles import TileGrid
from .world import MessageLog, World

logger = get_logger(__name__)

Snapshot = tuple[World, Entity, list[Entity], list[Entity]]

# what a truncated or foreign blob can raise while being decoded
_UNPICKLE_ERRORS = (
    zlib.error,
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    TypeError,
    ValueError,
)


class PersistenceError(Exception):
    """Base class for save/load failures. Never fatal to a game."""


class SaveError(PersistenceError):
    """The save slot could not be written."""


class LoadError(PersistenceError):
    """The save data is unreadable or has the wrong shape."""


class NoSaveAvailable(PersistenceError):
    """There is no save in the slot."""


def save(
    world: World, player: Entity, monsters: list[Entity], items: list[Entity]
) -> bytes:
    return zlib.compress(pickle.dumps((world, player, list(monsters), list(items))))


def load(blob: bytes) -> Snapshot:
    try:
        data = pickle.loads(zlib.decompress(blob))
    except _UNPICKLE_ERRORS as exc:
        raise LoadError(f"unreadable save data: {exc}") from exc

    if not (isinstance(data, tuple) and len(data) == 4):
        raise LoadError("save data is not a (world, player, monsters, items) tuple")
    world, player, monsters, items = data
    if not (
        isinstance(world, World)
        and isinstance(player, Entity)
        and isinstance(monsters, list)
        and isinstance(items, list)
    ):
        raise LoadError("save data has unexpected types")
    if not (
        isinstance(getattr(world, "grid", None), TileGrid)
        and isinstance(getattr(world, "messages", None), MessageLog)
        and isinstance(getattr(world, "inventory", None), list)
    ):
        raise LoadError("save data holds a malformed world")
    if not all(
        isinstance(obj, Entity) for obj in [*monsters, *items, *world.inventory]
    ):
        raise LoadError("save data holds something that is not an entity")
    return world, player, monsters, items


def dumps_state(state: GameState) -> bytes:
    return save(state.world, state.player, state.monsters, state.items)


def loads_state(blob: bytes) -> GameState:
    world, player, monsters, items = load(blob)
    return GameState(
        world=world,
        player=player,
        monsters=monsters,
        items=items,
        is_finished=not player.alive,
    )


def save_game(path: Path, state: GameState) -> None:
    """Write the save slot, replacing any previous save."""
    blob = dumps_state(state)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(blob)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        logger.warning("save_failed", path=str(path), error=str(exc))
        raise SaveError(f"could not write {path}: {exc}") from exc
    logger.debug("game_saved", path=str(path), size=len(blob))


def load_game(path: Path) -> GameState:
    try:
        blob = path.read_bytes()
    except FileNotFoundError as exc:
        raise NoSaveAvailable(f"no saved game at {path}") from exc
    except OSError as exc:
        raise LoadError(f"could not read {path}: {exc}") from exc
    return loads_state(blob)
