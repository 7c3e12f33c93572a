"""Xitzin application factory for Tombs."""

from pathlib import Path

from sqlmodel import SQLModel, create_engine
from xitzin import Xitzin

from .config import Config
from .engine.tuning import Tuning
from .logging import get_logger

logger = get_logger(__name__)


def create_app(config: Config | None = None, tuning: Tuning | None = None) -> Xitzin:
    """Create and configure the Xitzin application."""
    config = config or Config.from_env()
    tuning = tuning or Tuning.from_env()

    templates_dir = Path(__file__).parent / "templates"

    app = Xitzin(
        title="Tombs of the Ancient Kings",
        version="0.1.0",
        templates_dir=templates_dir,
    )

    engine = create_engine(config.database_url)
    app.state.engine = engine
    app.state.config = config
    app.state.tuning = tuning

    @app.on_startup
    async def startup():
        """Initialize the database."""
        SQLModel.metadata.create_all(engine)
        logger.info(
            "startup_complete",
            map_width=tuning.map_width,
            map_height=tuning.map_height,
            seeded=config.seed is not None,
        )

    from .routes import home, play

    home.register_routes(app)
    play.register_routes(app)

    return app
