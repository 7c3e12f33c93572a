"""Gameplay routes."""

from contextlib import contextmanager

from sqlmodel import Session
from xitzin import Redirect, Request, Xitzin
from xitzin.auth import get_identity, require_certificate

from ..engine.codec import SaveError
from ..engine.commands import DIRECTIONS
from ..session import TombsSession, get_or_create_player


@contextmanager
def _game_session(request: Request):
    """Load the player's game session with auto-close."""
    identity = get_identity(request)
    db_session = Session(request.app.state.engine)
    try:
        player = get_or_create_player(db_session, identity.fingerprint)
        yield TombsSession.load_or_create(
            db_session,
            player,
            request.app.state.tuning,
            seed=request.app.state.config.seed,
        )
    finally:
        db_session.close()


def _render_play(app: Xitzin, game: TombsSession, message: str = ""):
    """Render the main play view."""
    return app.template(
        "play.gmi",
        status=game.get_status(),
        map_lines=game.get_map(),
        messages=game.get_messages(),
        message=message,
        level_up_pending=game.state.player.level_up_pending,
        is_finished=game.state.is_finished,
    )


SAVE_FAILED = "Could not save your game."


def _save(game: TombsSession, message: str = "") -> str:
    """Save the game; on failure append a notice to the turn's message."""
    try:
        game.save()
    except SaveError:
        return f"{message}\n{SAVE_FAILED}" if message else SAVE_FAILED
    return message


def _run(app: Xitzin, request: Request, command: str):
    with _game_session(request) as game:
        if game.state.is_finished:
            return _render_play(app, game, message="The game is over.")
        message = _save(game, game.process_command(command))
        return _render_play(app, game, message=message)


def _register_action_routes(app: Xitzin) -> None:
    """Register command and movement routes."""

    @app.gemini("/play", name="play")
    @require_certificate
    def play(request: Request):
        """Main game view."""
        with _game_session(request) as game:
            return _render_play(app, game, message=_save(game))

    @app.gemini("/go/{direction}", name="go")
    @require_certificate
    def go(request: Request, direction: str):
        """Movement via clickable link."""
        if direction not in DIRECTIONS:
            return Redirect("/play")
        return _run(app, request, direction)

    @app.gemini("/wait", name="wait")
    @require_certificate
    def wait(request: Request):
        return _run(app, request, "wait")

    @app.gemini("/get", name="get")
    @require_certificate
    def get(request: Request):
        """Pick up what lies under the player."""
        return _run(app, request, "get")

    @app.gemini("/descend", name="descend")
    @require_certificate
    def descend(request: Request):
        return _run(app, request, "descend")

    @app.input("/cmd", prompt="What do you want to do?", name="cmd")
    @require_certificate
    def cmd(request: Request, query: str):
        """Freeform command entry."""
        return _run(app, request, query)


def _register_info_routes(app: Xitzin) -> None:
    """Register inventory, character and game management routes."""

    @app.gemini("/inventory", name="inventory")
    @require_certificate
    def inventory(request: Request):
        """Show carried items."""
        with _game_session(request) as game:
            items = game.get_inventory()
            if not items:
                message = "Inventory is empty."
            else:
                message = "You are carrying:\n" + "\n".join(
                    f"  {item}" for item in items
                )
            return _render_play(app, game, message=message)

    @app.gemini("/character", name="character")
    @require_certificate
    def character(request: Request):
        """Show character information."""
        with _game_session(request) as game:
            message = "Character information\n" + "\n".join(
                game.get_character_info()
            )
            return _render_play(app, game, message=message)

    @app.input(
        "/new",
        prompt="Are you sure you want to start over? Type YES to confirm:",
        name="new_game",
    )
    @require_certificate
    def new_game(request: Request, query: str):
        """Reset game with confirmation."""
        with _game_session(request) as game:
            if query.strip().upper() == "YES":
                game.reset()
                message = _save(game, "A new descent begins!")
                return _render_play(app, game, message=message)
            return Redirect("/play")


def register_routes(app: Xitzin) -> None:
    """Register gameplay routes."""
    _register_action_routes(app)
    _register_info_routes(app)
