"""Shared test fixtures for Tombs."""

import random
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from tombs.app import create_app
from tombs.config import Config
from tombs.engine.entities import create_player
from tombs.engine.state import GameState
from tombs.engine.tiles import TileGrid
from tombs.engine.tuning import Tuning
from tombs.engine.world import World
from tombs.models import Player


class StubOracle:
    """Visibility oracle for tests: everything visible, or a fixed set."""

    def __init__(self, visible: set[tuple[int, int]] | None = None):
        self.visible = visible
        self.recomputed: list[tuple[int, int, int]] = []

    def recompute_from(self, x: int, y: int, radius: int) -> None:
        self.recomputed.append((x, y, radius))

    def is_visible(self, x: int, y: int) -> bool:
        return self.visible is None or (x, y) in self.visible


def _open_state(
    width: int = 20, height: int = 15, px: int = 5, py: int = 5
) -> GameState:
    """A game on an open floor surrounded by a one-tile wall."""
    grid = TileGrid(width, height)
    for x in range(1, width - 1):
        for y in range(1, height - 1):
            grid.carve(x, y)
    return GameState(world=World(grid=grid), player=create_player(px, py))


@pytest.fixture
def tuning() -> Tuning:
    return Tuning()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_state():
    """Factory for open-floor games, e.g. ``make_state(px=2, py=2)``."""
    return _open_state


@pytest.fixture
def stub_oracle():
    """Factory for visibility stubs, e.g. ``stub_oracle(visible={(1, 1)})``."""
    return StubOracle


@pytest.fixture
def oracle() -> StubOracle:
    return StubOracle()


@pytest.fixture
def state() -> GameState:
    return _open_state()


@pytest.fixture
def db_engine(tmp_path: Path):
    db_url = f"sqlite:///{tmp_path}/test.db"
    engine = create_engine(db_url)
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def test_player(db_session: Session) -> Player:
    player = Player(fingerprint="test-fingerprint-abc123")
    db_session.add(player)
    db_session.commit()
    db_session.refresh(player)
    return player


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    return Config(database_url=f"sqlite:///{tmp_path}/test.db", seed=7)


@pytest.fixture
def app(test_config: Config, db_engine):
    return create_app(test_config, Tuning())


@pytest.fixture
def client(app):
    from xitzin.testing import test_app

    with test_app(app) as client:
        yield client


@pytest.fixture
def auth_client(client):
    return client.with_certificate("test-fingerprint-abc123")
